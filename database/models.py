"""SQLAlchemy ORM models for the meal subscription service.

Four tables: users, meal_plans, subscriptions and testimonials. Cross-table
references (`subscriptions.user_id`, `subscriptions.plan_id`) are plain
integer columns without declared foreign keys; the services enforce them.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, Boolean, JSON, Enum as SAEnum
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import declarative_base
from datetime import datetime

from core.enums import Role, SubscriptionStatus, PlanLifecycle

Base = declarative_base()


def _enum_column(enum_cls, **kwargs):
    """Store an Enum by its value in a portable VARCHAR column."""
    return Column(
        SAEnum(enum_cls, native_enum=False, values_callable=lambda e: [m.value for m in e],
               validate_strings=True, length=20),
        **kwargs
    )


class User(Base):
    """Registered account. `role` drives authorization."""

    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = _enum_column(Role, nullable=False, default=Role.CUSTOMER)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class MealPlan(Base):
    """Catalog entry with a per-meal unit price.

    Plans are never removed; retiring one sets `lifecycle` to retired so that
    historical subscriptions keep a valid reference.
    """

    __tablename__ = "meal_plans"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    description = Column(Text, nullable=False)
    features = Column(JSON, nullable=False, default=list)
    icon = Column(String(10), nullable=False, default="🍽️")
    lifecycle = _enum_column(PlanLifecycle, nullable=False, default=PlanLifecycle.ACTIVE, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @hybrid_property
    def is_active(self):
        return self.lifecycle == PlanLifecycle.ACTIVE

    @is_active.expression
    def is_active(cls):
        return cls.lifecycle == PlanLifecycle.ACTIVE


class Subscription(Base):
    """A customer's recurring order against a meal plan.

    `name` and `phone_number` are a snapshot taken at creation time.
    `paused_start`/`paused_end` are set only while `status` is paused.
    """

    __tablename__ = "subscriptions"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    plan_id = Column(Integer, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=False)
    meal_types = Column(JSON, nullable=False)
    delivery_days = Column(JSON, nullable=False)
    allergies = Column(Text, nullable=True)
    total_price = Column(Numeric(12, 2), nullable=False)
    status = _enum_column(SubscriptionStatus, nullable=False, default=SubscriptionStatus.ACTIVE, index=True)
    paused_start = Column(DateTime, nullable=True)
    paused_end = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Testimonial(Base):
    """Customer review shown on the public site once approved."""

    __tablename__ = "testimonials"
    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String(100), nullable=False)
    rating = Column(Integer, nullable=False)  # 1-5
    review_message = Column(Text, nullable=False)
    is_approved = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
