"""User router: own profile and the admin user listing."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from core.auth import Principal, get_current_principal, require_admin
from core.csrf import verify_csrf
from core.logger import get_logger
from database import models
from database.deps import get_db_read, get_db_write
from schemas.auth_schema import ProfileUpdateRequest, UserOut
from services import auth_service

logger = get_logger("api.users")
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db_read), _: Principal = Depends(require_admin)):
    """Return every user account (admin only)."""
    return db.query(models.User).order_by(models.User.id.asc()).all()


@router.get("/profile", response_model=UserOut)
def get_profile(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db_read)):
    return auth_service.get_profile(db, principal)


@router.put("/profile", response_model=UserOut, dependencies=[Depends(verify_csrf)])
def update_profile(
    payload: ProfileUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_write),
):
    """Update the caller's display name."""
    user = auth_service.update_profile(db, principal, payload.name)
    logger.info("User id=%s updated profile", user.id)
    return user
