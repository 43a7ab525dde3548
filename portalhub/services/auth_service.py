"""Account authentication, token issuance and password recovery."""
from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Tuple
from urllib.parse import urlencode
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..models import User
from ..security.secrets import MissingSecretError, require_secret
from .email_service import EmailDeliveryError, send_password_reset_email

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_PURPOSE = "access"
RESET_PURPOSE = "password_reset"


@lru_cache(maxsize=1)
def _get_jwt_secret() -> str:
    try:
        return require_secret("JWT_SECRET_KEY", min_length=8)
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return _pwd_context.verify(password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(
    subject: UUID,
    *,
    expires_minutes: Optional[int] = None,
    purpose: str = ACCESS_PURPOSE,
    claims: Optional[dict] = None,
) -> str:
    """Create a signed JWT holding the provided ``subject``."""

    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire_delta = timedelta(minutes=expires_minutes or settings.jwt_expires_minutes)
    payload = {**(claims or {}), "sub": str(subject), "exp": now + expire_delta, "iat": now, "purpose": purpose}
    return jwt.encode(payload, _get_jwt_secret(), algorithm=settings.jwt_algorithm)


def _decode(token: str, *, purpose: str) -> dict:
    settings = get_settings()
    try:
        payload = jwt.decode(token, _get_jwt_secret(), algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    if payload.get("purpose", ACCESS_PURPOSE) != purpose:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload


def _subject(payload: dict) -> UUID:
    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc


def decode_access_token(token: str, *, purpose: str = ACCESS_PURPOSE) -> UUID:
    """Decode and validate a JWT, returning the embedded subject UUID."""

    return _subject(_decode(token, purpose=purpose))


def _password_fingerprint(user: User) -> str:
    return hashlib.sha256(user.hashed_password.encode("utf-8")).hexdigest()[:16]


def _get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(func.lower(User.email) == _normalize_email(email)))


def sign_up(db: Session, *, email: str, password: str) -> Tuple[User, str]:
    """Create an account and return it with an access token."""

    if _get_user_by_email(db, email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(email=_normalize_email(email), hashed_password=hash_password(password))
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register user")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to sign up") from exc

    return user, create_access_token(user.id)


def sign_in(db: Session, *, email: str, password: str) -> Tuple[User, str]:
    user = _get_user_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    try:
        user.last_sign_in_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Failed to record sign-in time for user %s", user.id)

    return user, create_access_token(user.id)


def request_password_reset(db: Session, *, email: str) -> None:
    """Email a reset link when the account exists; callers never learn which."""

    user = _get_user_by_email(db, email)
    if user is None:
        logger.info("Password reset requested for unknown address")
        return

    settings = get_settings()
    token = create_access_token(
        user.id,
        expires_minutes=settings.password_reset_minutes,
        purpose=RESET_PURPOSE,
        claims={"pwd": _password_fingerprint(user)},
    )
    link = f"{settings.public_base_url.rstrip('/')}/auth/reset-password?{urlencode({'token': token})}"
    try:
        send_password_reset_email(user.email, link)
    except EmailDeliveryError:
        logger.exception("Password reset email could not be delivered to user %s", user.id)


def _set_password(db: Session, user: User, new_password: str) -> User:
    user.hashed_password = hash_password(new_password)
    user.password_changed_at = datetime.now(timezone.utc)
    try:
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update password for user %s", user.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update password"
        ) from exc
    return user


def reset_password(db: Session, *, token: str, new_password: str) -> User:
    payload = _decode(token, purpose=RESET_PURPOSE)
    user = db.get(User, _subject(payload))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    # The fingerprint changes with the password, so each link works once
    if payload.get("pwd") != _password_fingerprint(user):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Reset link has already been used")

    return _set_password(db, user, new_password)


def update_password(db: Session, *, user: User, new_password: str) -> User:
    account = db.get(User, user.id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return _set_password(db, account, new_password)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
    db: Session = Depends(get_session),
) -> User:
    """Resolve the authenticated user from the provided bearer token."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

    user = db.get(User, decode_access_token(credentials.credentials))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_session),
) -> User | None:
    """Return the authenticated user when a bearer token is provided."""

    if not credentials or credentials.scheme.lower() != "bearer":
        return None
    try:
        user_id = decode_access_token(credentials.credentials)
    except HTTPException:
        return None
    return db.get(User, user_id)


def resolve_websocket_user(db: Session, token: str | None) -> User | None:
    """Authenticate a WebSocket handshake from its ``token`` query parameter."""

    if not token:
        return None
    try:
        user_id = decode_access_token(token)
    except HTTPException:
        return None
    return db.get(User, user_id)


__all__ = [
    "sign_up",
    "sign_in",
    "request_password_reset",
    "reset_password",
    "update_password",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "get_current_user",
    "get_optional_user",
    "resolve_websocket_user",
]
