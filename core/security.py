"""Password hashing, password policy and JWT helpers."""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import jwt
from passlib.context import CryptContext

from core.config import settings
from core.exceptions import AuthenticationError
from core.logger import get_logger

logger = get_logger("core.security")

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

SPECIAL_CHARACTERS = r"""!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?"""

# (rule id, predicate, message) in the order they are reported.
PASSWORD_RULES = [
    ("length", lambda p: len(p) >= 8, "Password must be at least 8 characters long"),
    ("uppercase", lambda p: re.search(r"[A-Z]", p) is not None,
     "Password must include at least one uppercase letter"),
    ("lowercase", lambda p: re.search(r"[a-z]", p) is not None,
     "Password must include at least one lowercase letter"),
    ("digit", lambda p: re.search(r"\d", p) is not None,
     "Password must include at least one number"),
    ("special", lambda p: re.search(f"[{SPECIAL_CHARACTERS}]", p) is not None,
     "Password must include at least one special character (!@#$%^&*)"),
]


def check_password_policy(password: str) -> List[Tuple[str, str]]:
    """Return every unmet password rule as ``(rule, message)`` pairs."""
    return [(rule, message) for rule, check, message in PASSWORD_RULES if not check(password)]


def hash_password(password: str) -> str:
    """Hash plain password with Argon2."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """Verify a password and return a replacement hash when the stored one is outdated."""
    if not hashed_password:
        return False, None
    return pwd_context.verify_and_update(plain_password, hashed_password)


def _create_token(claims: Dict[str, Any], secret: str, token_type: str, expires_delta: timedelta) -> str:
    to_encode = dict(claims)
    now = datetime.now(timezone.utc)
    to_encode.update({
        "iat": now,
        "exp": now + expires_delta,
        "type": token_type,
    })
    return jwt.encode(to_encode, secret, algorithm=settings.jwt_algorithm)


def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        claims,
        settings.access_token_secret,
        ACCESS_TOKEN_TYPE,
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        claims,
        settings.refresh_token_secret,
        REFRESH_TOKEN_TYPE,
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """Decode and verify a token of the expected type.

    Raises:
        AuthenticationError: If the token is expired, malformed, signed with
            the wrong secret or of the wrong type.
    """
    secret = settings.refresh_token_secret if expected_type == REFRESH_TOKEN_TYPE else settings.access_token_secret
    try:
        decoded = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired %s token", expected_type)
        raise AuthenticationError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.info("Rejected invalid %s token: %s", expected_type, e)
        raise AuthenticationError("Invalid token")

    if decoded.get("type") != expected_type:
        raise AuthenticationError(f"Invalid token type: expected {expected_type}")
    return decoded
