"""Authentication endpoints for the Veilpost API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from veilpost.core.security import create_access_token
from veilpost.schemas.common import ApiResponse
from veilpost.schemas.user import (
    ProfileEnvelope,
    SignInRequest,
    SignUpRequest,
    TokenEnvelope,
    UserProfile,
    VerifyCodeRequest,
)
from veilpost.services import user_service

from ..dependencies import CurrentUserDep, EmailSenderDep, SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/sign-up", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: SignUpRequest,
    db: SessionDep,
    email_sender: EmailSenderDep,
) -> ApiResponse:
    """Register an account and email a verification code."""
    result = await user_service.sign_up(
        db,
        email_sender,
        username=payload.username,
        email=payload.email,
        password=payload.password,
    )
    message = (
        "User registered successfully. Please verify your account."
        if result.created
        else "Verification code re-sent. Please verify your account."
    )
    return ApiResponse(message=message)


@router.post("/verify-code", response_model=ApiResponse)
async def verify_code(payload: VerifyCodeRequest, db: SessionDep) -> ApiResponse:
    """Verify an account with the emailed code."""
    user_service.verify_code(db, payload.username.strip(), payload.code)
    return ApiResponse(message="Account verified successfully")


@router.post("/sign-in", response_model=TokenEnvelope)
def sign_in(payload: SignInRequest, db: SessionDep) -> TokenEnvelope:
    """Exchange credentials for a bearer token.

    Plain ``def`` so password verification runs in the threadpool.
    """
    user = user_service.authenticate(db, payload.identifier, payload.password)
    return TokenEnvelope(
        message="Signed in successfully",
        access_token=create_access_token(user.id),
    )


@router.get("/check-username-unique", response_model=ApiResponse)
async def check_username_unique(
    db: SessionDep,
    username: str = Query(..., description="Username to check"),
) -> ApiResponse:
    """Report whether a username is still available."""
    if user_service.check_username_unique(db, username):
        return ApiResponse(message="Username is available")
    return ApiResponse(success=False, message="Username is already taken")


@router.get("/me", response_model=ProfileEnvelope)
async def me(current_user: CurrentUserDep) -> ProfileEnvelope:
    """Return the caller's profile."""
    return ProfileEnvelope(user=UserProfile.model_validate(current_user))
