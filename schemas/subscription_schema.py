"""Schemas for subscriptions and admin subscription reports."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from core.enums import SubscriptionStatus
from .base import CamelModel


class SubscriptionCreateRequest(CamelModel):
    """Subscription order.

    Only the shape is checked here; cardinality, allowed values, phone format
    and allergy length are validated together by the pricing service so all
    violations are reported at once.
    """

    name: str = Field(..., examples=["Jane Doe"])
    phone_number: str = Field(..., examples=["081234567890"])
    plan_id: int = Field(..., examples=[1])
    meal_types: List[str] = Field(..., examples=[["Breakfast", "Lunch"]])
    delivery_days: List[str] = Field(..., examples=[["Monday", "Wednesday", "Friday"]])
    allergies: Optional[str] = Field(None, examples=["Peanuts"])


class SubscriptionStatusUpdateRequest(CamelModel):
    status: str = Field(..., examples=["paused"])
    paused_start: Optional[datetime] = Field(None, examples=["2026-11-01T00:00:00"])
    paused_end: Optional[datetime] = Field(None, examples=["2026-11-15T00:00:00"])


class SubscriptionOut(CamelModel):
    id: int
    user_id: int
    plan_id: int
    name: str
    phone_number: str
    meal_types: List[str]
    delivery_days: List[str]
    allergies: Optional[str] = None
    total_price: float
    status: SubscriptionStatus
    paused_start: Optional[datetime] = None
    paused_end: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubscriptionCreateResponse(CamelModel):
    message: str
    subscription_id: int
    total_price: float
    subscription: SubscriptionOut


class SubscriptionStatusResponse(CamelModel):
    message: str
    subscription: SubscriptionOut


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class SubscriptionPage(CamelModel):
    subscriptions: List[SubscriptionOut]
    pagination: Pagination


class SubscriptionStats(CamelModel):
    total_subscriptions: int
    total_revenue: float
    active_subscriptions: int
    paused_subscriptions: int
    cancelled_subscriptions: int


class SubscriptionStatsResponse(CamelModel):
    overall_stats: SubscriptionStats


class DashboardStats(CamelModel):
    total_users: int
    active_meal_plans: int
    active_subscriptions: int
    approved_testimonials: int
    timestamp: datetime
