"""Schemas for testimonial submission and moderation."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel


class TestimonialCreateRequest(CamelModel):
    customer_name: str = Field(..., min_length=2, max_length=100, examples=["Sarah M."])
    rating: int = Field(..., ge=1, le=5, examples=[5], description="Rating from 1 (poor) to 5 (excellent)")
    review_message: str = Field(..., min_length=10, max_length=1000)


class TestimonialApprovalRequest(CamelModel):
    is_approved: bool


class TestimonialOut(CamelModel):
    id: int
    customer_name: str
    rating: int
    review_message: str
    is_approved: bool
    created_at: Optional[datetime] = None


class TestimonialCreateResponse(CamelModel):
    message: str
    testimonial_id: int


class TestimonialApprovalResponse(CamelModel):
    message: str
    testimonial: TestimonialOut
