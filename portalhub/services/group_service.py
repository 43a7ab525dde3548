"""Chat groups: membership, roles and the message log.

A group always keeps at least one admin. The sole admin cannot leave, be
demoted or be removed until another member is promoted.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import GroupRole
from ..models import Group, GroupMember, GroupMessage, User
from ..models.counters import adjust_group_members
from ..schemas import GroupCreate, GroupMemberResponse, GroupUpdate, MessageResponse
from .hydration import load_profile_summaries
from .realtime import change_feed

logger = logging.getLogger(__name__)

LAST_ADMIN_DETAIL = "You are the last admin. Please promote another member to admin before leaving."


@contextmanager
def _writing(db: Session, detail: str) -> Iterator[None]:
    try:
        yield
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Membership changed concurrently") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail) from exc


def _commit(db: Session, detail: str) -> None:
    with _writing(db, detail):
        pass


def _get_membership(db: Session, group_id: UUID, user_id: UUID) -> GroupMember | None:
    return db.scalar(
        select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
    )


def _admin_count(db: Session, group_id: UUID) -> int:
    return int(
        db.scalar(
            select(func.count())
            .select_from(GroupMember)
            .where(GroupMember.group_id == group_id, GroupMember.role == GroupRole.ADMIN.value)
        )
        or 0
    )


def _require_admin(db: Session, group_id: UUID, user: User) -> GroupMember:
    membership = _get_membership(db, group_id, user.id)
    if membership is None or membership.role != GroupRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only group admins can do that")
    return membership


def _require_member(db: Session, group_id: UUID, user: User) -> GroupMember:
    membership = _get_membership(db, group_id, user.id)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not a member of this group")
    return membership


def get_group(db: Session, group_id: UUID) -> Group:
    group = db.get(Group, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    return group


def get_groups(db: Session) -> Sequence[Group]:
    return db.scalars(select(Group).order_by(Group.created_at.desc())).all()


def get_public_groups(db: Session) -> Sequence[Group]:
    return db.scalars(select(Group).where(Group.is_private.is_(False)).order_by(Group.created_at.desc())).all()


def get_my_groups(db: Session, *, user: User) -> Sequence[Group]:
    group_ids = db.scalars(select(GroupMember.group_id).where(GroupMember.user_id == user.id)).all()
    if not group_ids:
        return []
    return db.scalars(select(Group).where(Group.id.in_(group_ids)).order_by(Group.created_at.desc())).all()


def create_group(db: Session, *, creator: User, payload: GroupCreate) -> Group:
    """Create a group and enrol its creator as the first admin."""

    group = Group(
        name=payload.name.strip(),
        description=payload.description.strip() if payload.description else None,
        is_private=payload.is_private,
        created_by=creator.id,
        member_count=0,
    )
    with _writing(db, "Unable to create group"):
        db.add(group)
        db.flush()
        db.add(GroupMember(group_id=group.id, user_id=creator.id, role=GroupRole.ADMIN.value))
        db.flush()
        adjust_group_members(db, group.id, 1)
    db.refresh(group)
    return group


def update_group(db: Session, *, user: User, group_id: UUID, payload: GroupUpdate) -> Group:
    group = get_group(db, group_id)
    _require_admin(db, group_id, user)
    updates = payload.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if value is None and field in {"name", "is_private"}:
            continue
        setattr(group, field, value.strip() if isinstance(value, str) else value)
    _commit(db, "Unable to update group")
    db.refresh(group)
    return group


def delete_group(db: Session, *, user: User, group_id: UUID) -> None:
    group = get_group(db, group_id)
    _require_admin(db, group_id, user)
    db.delete(group)
    _commit(db, "Unable to delete group")


def get_group_members(db: Session, *, group_id: UUID) -> list[GroupMemberResponse]:
    get_group(db, group_id)
    members = db.scalars(
        select(GroupMember).where(GroupMember.group_id == group_id).order_by(GroupMember.joined_at.asc())
    ).all()
    profiles = load_profile_summaries(db, (member.user_id for member in members))
    return [
        GroupMemberResponse.model_validate(member).model_copy(update={"profile": profiles.get(member.user_id)})
        for member in members
    ]


def join_group(db: Session, *, user: User, group_id: UUID) -> GroupMember:
    group = get_group(db, group_id)
    if group.is_private:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This is a private group. You need an invitation to join.",
        )
    if _get_membership(db, group_id, user.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You are already a member of this group.")

    membership = GroupMember(group_id=group_id, user_id=user.id, role=GroupRole.MEMBER.value)
    with _writing(db, "Unable to join group"):
        db.add(membership)
        db.flush()
        adjust_group_members(db, group_id, 1)
    db.refresh(membership)
    return membership


def leave_group(db: Session, *, user: User, group_id: UUID) -> None:
    get_group(db, group_id)
    membership = _get_membership(db, group_id, user.id)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You are not a member of this group")
    if membership.role == GroupRole.ADMIN and _admin_count(db, group_id) <= 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=LAST_ADMIN_DETAIL)

    db.delete(membership)
    adjust_group_members(db, group_id, -1)
    _commit(db, "Unable to leave group")


def change_role(db: Session, *, actor: User, group_id: UUID, user_id: UUID, role: GroupRole) -> GroupMember:
    get_group(db, group_id)
    _require_admin(db, group_id, actor)
    membership = _get_membership(db, group_id, user_id)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")

    role = GroupRole(role)
    if membership.role == GroupRole.ADMIN and role != GroupRole.ADMIN and _admin_count(db, group_id) <= 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A group must keep at least one admin")

    membership.role = role.value
    _commit(db, "Unable to change member role")
    db.refresh(membership)
    return membership


def remove_member(db: Session, *, actor: User, group_id: UUID, user_id: UUID) -> None:
    get_group(db, group_id)
    _require_admin(db, group_id, actor)
    membership = _get_membership(db, group_id, user_id)
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    if membership.role == GroupRole.ADMIN and _admin_count(db, group_id) <= 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A group must keep at least one admin")

    db.delete(membership)
    adjust_group_members(db, group_id, -1)
    _commit(db, "Unable to remove member")


def _hydrate_messages(db: Session, messages: Sequence[GroupMessage]) -> list[MessageResponse]:
    profiles = load_profile_summaries(db, (message.user_id for message in messages))
    return [
        MessageResponse.model_validate(message).model_copy(update={"profile": profiles.get(message.user_id)})
        for message in messages
    ]


def _can_read(db: Session, group: Group, user: User | None) -> bool:
    if not group.is_private:
        return True
    return user is not None and _get_membership(db, group.id, user.id) is not None


def can_read_group(db: Session, group_id: UUID, user_id: UUID) -> bool:
    """Whether ``user_id`` may currently read the group's messages."""

    group = db.get(Group, group_id)
    if group is None:
        return False
    if not group.is_private:
        return True
    return _get_membership(db, group_id, user_id) is not None


def get_messages(db: Session, *, group_id: UUID, user: User | None) -> list[MessageResponse]:
    group = get_group(db, group_id)
    if not _can_read(db, group, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You are not a member of this group")
    messages = db.scalars(
        select(GroupMessage).where(GroupMessage.group_id == group_id).order_by(GroupMessage.created_at.asc())
    ).all()
    return _hydrate_messages(db, messages)


def get_message(db: Session, message_id: UUID) -> MessageResponse:
    message = db.get(GroupMessage, message_id)
    if message is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Message not found")
    return _hydrate_messages(db, [message])[0]


def send_message(db: Session, *, sender: User, group_id: UUID, content: str) -> MessageResponse:
    get_group(db, group_id)
    _require_member(db, group_id, sender)
    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Message cannot be empty")

    message = GroupMessage(group_id=group_id, user_id=sender.id, content=text)
    db.add(message)
    _commit(db, "Unable to send message")
    db.refresh(message)

    change_feed.publish_insert(
        "messages",
        group_id,
        {
            "id": str(message.id),
            "group_id": str(message.group_id),
            "user_id": str(message.user_id),
            "created_at": message.created_at.isoformat(),
        },
    )
    return _hydrate_messages(db, [message])[0]


__all__ = [
    "LAST_ADMIN_DETAIL",
    "can_read_group",
    "get_group",
    "get_groups",
    "get_public_groups",
    "get_my_groups",
    "create_group",
    "update_group",
    "delete_group",
    "get_group_members",
    "join_group",
    "leave_group",
    "change_role",
    "remove_member",
    "get_messages",
    "get_message",
    "send_message",
]
