"""Saved-post collection API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    CollectionCreate,
    CollectionItemCreate,
    CollectionItemListResponse,
    CollectionListResponse,
    CollectionResponse,
)
from ..services import (
    add_to_collection,
    create_collection,
    delete_collection,
    get_current_user,
    list_collection_items,
    list_collections,
    remove_from_collection,
)

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("", response_model=CollectionListResponse)
async def list_collections_endpoint(
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CollectionListResponse:
    return CollectionListResponse(items=list_collections(db, user=current_user))


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_collection_endpoint(
    payload: CollectionCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CollectionResponse:
    return CollectionResponse.model_validate(create_collection(db, user=current_user, payload=payload))


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection_endpoint(
    collection_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    delete_collection(db, user=current_user, collection_id=collection_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{collection_id}/items", response_model=CollectionItemListResponse)
async def list_items_endpoint(
    collection_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> CollectionItemListResponse:
    return CollectionItemListResponse(items=list_collection_items(db, user=current_user, collection_id=collection_id))


@router.post("/{collection_id}/items", status_code=status.HTTP_201_CREATED)
async def add_item_endpoint(
    collection_id: UUID,
    payload: CollectionItemCreate,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> dict[str, str]:
    item = add_to_collection(db, user=current_user, collection_id=collection_id, post_id=payload.post_id)
    return {"id": str(item.id), "collection_id": str(item.collection_id), "post_id": str(item.post_id)}


@router.delete("/{collection_id}/items/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item_endpoint(
    collection_id: UUID,
    post_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    remove_from_collection(db, user=current_user, collection_id=collection_id, post_id=post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
