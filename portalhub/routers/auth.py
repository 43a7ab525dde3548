"""Authentication API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Profile, User
from ..schemas import (
    AccountResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordUpdateRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
)
from ..services import (
    get_current_user,
    request_password_reset,
    reset_password,
    sign_in,
    sign_up,
    update_password,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/sign-up", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def sign_up_endpoint(payload: SignUpRequest, db: Session = Depends(get_session)) -> TokenResponse:
    user, token = sign_up(db, email=str(payload.email), password=payload.password)
    return TokenResponse(access_token=token, user_id=user.id, has_profile=False)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in_endpoint(payload: SignInRequest, db: Session = Depends(get_session)) -> TokenResponse:
    user, token = sign_in(db, email=str(payload.email), password=payload.password)
    has_profile = db.get(Profile, user.id) is not None
    return TokenResponse(access_token=token, user_id=user.id, has_profile=has_profile)


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def password_reset_request_endpoint(
    payload: PasswordResetRequest,
    db: Session = Depends(get_session),
) -> dict[str, str]:
    request_password_reset(db, email=str(payload.email))
    return {"status": "accepted"}


@router.post("/password-reset/confirm", response_model=AccountResponse)
async def password_reset_confirm_endpoint(
    payload: PasswordResetConfirm,
    db: Session = Depends(get_session),
) -> AccountResponse:
    user = reset_password(db, token=payload.token, new_password=payload.new_password)
    return AccountResponse.model_validate(user)


@router.post("/password", response_model=AccountResponse)
async def update_password_endpoint(
    payload: PasswordUpdateRequest,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AccountResponse:
    user = update_password(db, user=current_user, new_password=payload.new_password)
    return AccountResponse.model_validate(user)


@router.get("/me", response_model=AccountResponse)
async def me_endpoint(current_user: User = Depends(get_current_user)) -> AccountResponse:
    return AccountResponse.model_validate(current_user)
