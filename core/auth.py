"""Bearer-token authentication and role authorization dependencies.

A validated access token becomes a `Principal`, the explicit credential object
handed to services. Role checks are membership tests against a set of `Role`
values; ownership checks live in the services that own the resources.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.enums import Role, ADMIN_ROLES
from core.exceptions import AuthenticationError, AuthorizationError
from core.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """Claims carried by a validated access token."""

    user_id: int
    role: Role
    name: str
    email: str

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    def has_any_role(self, roles: Iterable[Role]) -> bool:
        return self.role in frozenset(roles)

    def to_claims(self) -> dict:
        return {"userId": self.user_id, "role": self.role.value, "name": self.name, "email": self.email}

    @classmethod
    def from_claims(cls, claims: dict) -> "Principal":
        try:
            return cls(
                user_id=int(claims["userId"]),
                role=Role(claims["role"]),
                name=claims.get("name") or "",
                email=claims.get("email") or "",
            )
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")

    @classmethod
    def from_user(cls, user) -> "Principal":
        return cls(user_id=user.id, role=Role(user.role), name=user.name, email=user.email)


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """Return the caller's principal, or None when no bearer token was sent.

    A token that is present but invalid still fails with 401.
    """
    if credentials is None:
        return None
    if credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError("Invalid authorization header")
    return Principal.from_claims(decode_token(credentials.credentials))


def get_principal_if_valid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Principal]:
    """Like `get_optional_principal`, but an expired or invalid token reads as anonymous."""
    try:
        return get_optional_principal(credentials)
    except AuthenticationError:
        return None


def get_current_principal(principal: Optional[Principal] = Depends(get_optional_principal)) -> Principal:
    """Require a valid bearer token."""
    if principal is None:
        raise AuthenticationError("Access token required")
    return principal


def require_roles(*roles: Role):
    """Build a dependency that admits only principals holding one of `roles`."""
    allowed = frozenset(roles)

    def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_any_role(allowed):
            raise AuthorizationError()
        return principal

    return _dependency


require_admin = require_roles(*ADMIN_ROLES)
