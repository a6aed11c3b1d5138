"""Authentication router: register, login, token refresh and logout.

Access tokens are returned in the response body. The refresh token lives in
an httpOnly cookie and is exchanged at `/auth/refresh`.
"""

from fastapi import APIRouter, Cookie, Depends, Response
from sqlalchemy.orm import Session
from typing import Optional

from core.config import settings
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas.auth_schema import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UserOut,
)
from schemas.base import MessageResponse
from services import auth_service

logger = get_logger("api.auth")
router = APIRouter(prefix="/auth", tags=["auth"])

REFRESH_COOKIE_NAME = "refreshToken"


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        REFRESH_COOKIE_NAME,
        token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production(),
        samesite="strict",
    )


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db_write)):
    """Create a customer account and sign it in.

    Raises:
        ValidationError: If the password policy is not met or the
            confirmation differs.
        ConflictError: If the email is already registered.
    """
    user = auth_service.register_user(db, payload.name, payload.email, payload.password, payload.confirm_password)
    access_token, refresh_token = auth_service.issue_tokens(user)
    _set_refresh_cookie(response, refresh_token)
    return RegisterResponse(
        message="User created successfully",
        access_token=access_token,
        user=UserOut.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db_write)):
    """Verify credentials and issue an access token plus refresh cookie.

    Raises:
        InvalidCredentialsError: For an unknown email or a wrong password.
    """
    user = auth_service.authenticate(db, payload.email, payload.password)
    access_token, refresh_token = auth_service.issue_tokens(user)
    _set_refresh_cookie(response, refresh_token)
    logger.info("User id=%s logged in", user.id)
    return LoginResponse(
        message="Login successful",
        access_token=access_token,
        user=UserOut.model_validate(user),
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    refresh_token: Optional[str] = Cookie(None, alias=REFRESH_COOKIE_NAME),
    db: Session = Depends(get_db_read),
):
    """Return a fresh access token for a valid refresh cookie."""
    return RefreshResponse(access_token=auth_service.refresh_access_token(db, refresh_token))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """Clear the refresh cookie."""
    response.delete_cookie(REFRESH_COOKIE_NAME, secure=settings.is_production(), samesite="strict", httponly=True)
    return MessageResponse(message="Logout successful")
