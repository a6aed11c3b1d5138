"""Double-submit cookie CSRF protection.

The client fetches a token from `GET /csrf-token`, which also stores it in a
JavaScript-readable cookie, and echoes it in the `X-CSRF-Token` header on
state-changing requests.
"""

import secrets
import hmac

from fastapi import Request, Response

from core.config import settings
from core.exceptions import CsrfError
from core.logger import get_logger

logger = get_logger("core.csrf")

CSRF_COOKIE_NAME = "csrfToken"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_MAX_AGE = 24 * 60 * 60
SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}


def generate_csrf_token() -> str:
    return secrets.token_hex(32)


def set_csrf_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=CSRF_COOKIE_MAX_AGE,
        httponly=False,
        secure=settings.is_production(),
        samesite="strict",
    )


def verify_csrf(request: Request) -> None:
    """Dependency that rejects unsafe requests without a matching CSRF header."""
    if not settings.csrf_enabled or request.method in SAFE_METHODS:
        return

    header_token = request.headers.get(CSRF_HEADER_NAME)
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    if not header_token or not cookie_token or not hmac.compare_digest(header_token, cookie_token):
        logger.warning("CSRF check failed for %s %s", request.method, request.url.path)
        raise CsrfError()
