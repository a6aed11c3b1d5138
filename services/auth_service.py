"""Account registration, login and profile updates."""

from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.auth import Principal
from core.enums import Role
from core.exceptions import AuthenticationError, ConflictError, InvalidCredentialsError, NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import save
from core.security import (
    check_password_policy,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
    REFRESH_TOKEN_TYPE,
)
from database import models
from services.pricing import sanitize_text

logger = get_logger("services.auth_service")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def issue_tokens(user: models.User) -> Tuple[str, str]:
    """Return ``(access_token, refresh_token)`` for a user."""
    claims = Principal.from_user(user).to_claims()
    return create_access_token(claims), create_refresh_token(claims)


def register_user(db: Session, name: str, email: str, password: str, confirm_password: str) -> models.User:
    """Create a customer account.

    Raises:
        ValidationError: If the passwords differ or the password policy is
            not met (every unmet rule is listed).
        ConflictError: If the email is already registered.
    """
    errors: List[dict] = []
    for rule, message in check_password_policy(password):
        errors.append({"field": "password", "rule": rule, "message": message})
    if password != confirm_password:
        errors.append({"field": "confirmPassword", "message": "Passwords do not match"})
    if errors:
        raise ValidationError("Password does not meet security requirements", errors=errors)

    email = normalize_email(email)
    if db.query(models.User).filter(models.User.email == email).first():
        raise ConflictError("Email already registered", details={"field": "email"})

    user = models.User(
        name=sanitize_text(name),
        email=email,
        password_hash=hash_password(password),
        role=Role.CUSTOMER,
    )
    try:
        user = save(db, user)
    except IntegrityError:
        # Lost a race against another registration for the same address.
        db.rollback()
        raise ConflictError("Email already registered", details={"field": "email"})

    logger.info("Registered user %s (id=%s)", user.email, user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> models.User:
    """Check credentials; unknown email and wrong password fail identically."""
    user = db.query(models.User).filter(models.User.email == normalize_email(email)).first()
    if user is None:
        logger.info("Login failed: unknown account")
        raise InvalidCredentialsError()

    valid, new_hash = verify_password(password, user.password_hash)
    if not valid:
        logger.info("Login failed for user id=%s", user.id)
        raise InvalidCredentialsError()

    if new_hash:
        user.password_hash = new_hash
        db.commit()
        logger.info("Upgraded password hash for user id=%s", user.id)
    return user


def refresh_access_token(db: Session, refresh_token: str) -> str:
    """Exchange a refresh token for a new access token.

    The user is re-read so role and name changes take effect immediately.
    """
    if not refresh_token:
        raise AuthenticationError("Refresh token not found")
    claims = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    principal = Principal.from_claims(claims)

    user = db.get(models.User, principal.user_id)
    if user is None:
        raise AuthenticationError("Invalid refresh token")
    return create_access_token(Principal.from_user(user).to_claims())


def get_profile(db: Session, principal: Principal) -> models.User:
    user = db.get(models.User, principal.user_id)
    if user is None:
        raise NotFoundError("User", principal.user_id)
    return user


def update_profile(db: Session, principal: Principal, name: str) -> models.User:
    user = get_profile(db, principal)
    clean = sanitize_text(name)
    if not clean or not 2 <= len(clean) <= 100:
        raise ValidationError("Name must be between 2 and 100 characters", field="name")
    user.name = clean
    db.commit()
    db.refresh(user)
    return user
