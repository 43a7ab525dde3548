"""User-owned collections of saved posts."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Collection, CollectionItem, User
from ..schemas import CollectionCreate, CollectionItemResponse, CollectionResponse
from .hydration import load_posts, serialize_posts
from .post_service import can_view_post, get_post

logger = logging.getLogger(__name__)


def _commit(db: Session, detail: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc


def get_owned_collection(db: Session, *, user: User, collection_id: UUID) -> Collection:
    collection = db.get(Collection, collection_id)
    if collection is None or collection.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Collection not found")
    return collection


def list_collections(db: Session, *, user: User) -> list[CollectionResponse]:
    counts = dict(
        db.execute(
            select(CollectionItem.collection_id, func.count(CollectionItem.id))
            .join(Collection, Collection.id == CollectionItem.collection_id)
            .where(Collection.user_id == user.id)
            .group_by(CollectionItem.collection_id)
        ).all()
    )
    collections = db.scalars(
        select(Collection).where(Collection.user_id == user.id).order_by(Collection.created_at.desc())
    ).all()
    return [
        CollectionResponse.model_validate(collection).model_copy(update={"item_count": counts.get(collection.id, 0)})
        for collection in collections
    ]


def create_collection(db: Session, *, user: User, payload: CollectionCreate) -> Collection:
    collection = Collection(
        user_id=user.id,
        name=payload.name.strip(),
        description=payload.description.strip() if payload.description else None,
        is_private=payload.is_private,
    )
    db.add(collection)
    _commit(db, "Unable to create collection")
    db.refresh(collection)
    return collection


def delete_collection(db: Session, *, user: User, collection_id: UUID) -> None:
    collection = get_owned_collection(db, user=user, collection_id=collection_id)
    db.delete(collection)
    _commit(db, "Unable to delete collection")


def list_collection_items(db: Session, *, user: User, collection_id: UUID) -> list[CollectionItemResponse]:
    get_owned_collection(db, user=user, collection_id=collection_id)
    items = db.scalars(
        select(CollectionItem)
        .where(CollectionItem.collection_id == collection_id)
        .order_by(CollectionItem.added_at.desc())
    ).all()

    posts = load_posts(db, (item.post_id for item in items))
    visible = [post for post in posts.values() if can_view_post(db, post, user.id)]
    serialized = {post.id: post for post in serialize_posts(db, visible)}
    return [
        CollectionItemResponse(
            id=item.id,
            collection_id=item.collection_id,
            post_id=item.post_id,
            added_at=item.added_at,
            post=serialized.get(item.post_id),
        )
        for item in items
    ]


def add_to_collection(db: Session, *, user: User, collection_id: UUID, post_id: UUID) -> CollectionItem:
    get_owned_collection(db, user=user, collection_id=collection_id)
    get_post(db, post_id, viewer_id=user.id)

    existing = db.scalar(
        select(CollectionItem.id).where(
            CollectionItem.collection_id == collection_id, CollectionItem.post_id == post_id
        )
    )
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Post already in collection")

    item = CollectionItem(collection_id=collection_id, post_id=post_id)
    db.add(item)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Post already in collection") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Unable to add post %s to collection %s", post_id, collection_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to add to collection"
        ) from exc
    db.refresh(item)
    return item


def remove_from_collection(db: Session, *, user: User, collection_id: UUID, post_id: UUID) -> bool:
    get_owned_collection(db, user=user, collection_id=collection_id)
    item = db.scalar(
        select(CollectionItem).where(
            CollectionItem.collection_id == collection_id, CollectionItem.post_id == post_id
        )
    )
    if item is None:
        return False
    db.delete(item)
    _commit(db, "Unable to remove from collection")
    return True


__all__ = [
    "get_owned_collection",
    "list_collections",
    "create_collection",
    "delete_collection",
    "list_collection_items",
    "add_to_collection",
    "remove_from_collection",
]
