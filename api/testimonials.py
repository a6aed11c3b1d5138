"""Testimonial router.

Anyone can read approved testimonials and submit one. Admins moderate by
toggling approval or deleting, and only they can list unapproved ones.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from core.auth import Principal, get_principal_if_valid, require_admin
from core.csrf import verify_csrf
from core.exceptions import AuthorizationError, NotFoundError
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from database.deps import get_db_read, get_db_write
from schemas.base import MessageResponse
from schemas.testimonial_schema import (
    TestimonialApprovalRequest,
    TestimonialApprovalResponse,
    TestimonialCreateRequest,
    TestimonialCreateResponse,
    TestimonialOut,
)
from services.pricing import sanitize_text

logger = get_logger("api.testimonials")
router = APIRouter(prefix="/testimonials", tags=["testimonials"])


@router.get("", response_model=List[TestimonialOut])
def list_testimonials(
    limit: int = Query(10, ge=1, le=100),
    approved: bool = Query(True),
    principal: Optional[Principal] = Depends(get_principal_if_valid),
    db: Session = Depends(get_db_read),
):
    """Newest testimonials first; `approved=false` includes unapproved ones and is admin-only."""
    if not approved and (principal is None or not principal.is_admin):
        raise AuthorizationError("Only administrators can view unapproved testimonials")
    query = db.query(models.Testimonial)
    if approved:
        query = query.filter(models.Testimonial.is_approved.is_(True))
    return query.order_by(models.Testimonial.created_at.desc(), models.Testimonial.id.desc()).limit(limit).all()


@router.post("", response_model=TestimonialCreateResponse, status_code=201, dependencies=[Depends(verify_csrf)])
def create_testimonial(payload: TestimonialCreateRequest, db: Session = Depends(get_db_write)):
    testimonial = BaseRepository(models.Testimonial, db).create(models.Testimonial(
        customer_name=sanitize_text(payload.customer_name),
        rating=payload.rating,
        review_message=sanitize_text(payload.review_message),
    ))
    logger.info("Testimonial %s submitted (rating=%s)", testimonial.id, testimonial.rating)
    return TestimonialCreateResponse(message="Testimonial submitted successfully", testimonial_id=testimonial.id)


@router.put("/{testimonial_id}/approval", response_model=TestimonialApprovalResponse,
            dependencies=[Depends(verify_csrf)])
def update_testimonial_approval(
    testimonial_id: int,
    payload: TestimonialApprovalRequest,
    db: Session = Depends(get_db_write),
    _: Principal = Depends(require_admin),
):
    repo = BaseRepository(models.Testimonial, db)
    testimonial = repo.get_by_id(testimonial_id)
    if testimonial is None:
        raise NotFoundError("Testimonial", testimonial_id)
    testimonial.is_approved = payload.is_approved
    testimonial = repo.update(testimonial)
    verb = "approved" if testimonial.is_approved else "disapproved"
    return TestimonialApprovalResponse(message=f"Testimonial {verb} successfully",
                                       testimonial=TestimonialOut.model_validate(testimonial))


@router.delete("/{testimonial_id}", response_model=MessageResponse, dependencies=[Depends(verify_csrf)])
def delete_testimonial(
    testimonial_id: int,
    db: Session = Depends(get_db_write),
    _: Principal = Depends(require_admin),
):
    repo = BaseRepository(models.Testimonial, db)
    testimonial = repo.get_by_id(testimonial_id)
    if testimonial is None:
        raise NotFoundError("Testimonial", testimonial_id)
    repo.delete(testimonial)
    logger.info("Testimonial %s deleted", testimonial_id)
    return MessageResponse(message="Testimonial deleted successfully")
