"""Pydantic schema package for request and response models."""

from .base import CamelModel, MessageResponse
from .auth_schema import RegisterRequest, LoginRequest, UserOut, ProfileUpdateRequest
from .meal_plan_schema import MealPlanCreateRequest, MealPlanUpdateRequest, MealPlanOut
from .subscription_schema import SubscriptionCreateRequest, SubscriptionStatusUpdateRequest, SubscriptionOut
from .testimonial_schema import TestimonialCreateRequest, TestimonialApprovalRequest, TestimonialOut

__all__ = [
    "CamelModel",
    "MessageResponse",
    "RegisterRequest",
    "LoginRequest",
    "UserOut",
    "ProfileUpdateRequest",
    "MealPlanCreateRequest",
    "MealPlanUpdateRequest",
    "MealPlanOut",
    "SubscriptionCreateRequest",
    "SubscriptionStatusUpdateRequest",
    "SubscriptionOut",
    "TestimonialCreateRequest",
    "TestimonialApprovalRequest",
    "TestimonialOut",
]
