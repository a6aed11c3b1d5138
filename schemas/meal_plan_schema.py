"""Schemas for the meal-plan catalog."""

from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class MealPlanCreateRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100, examples=["Diet Plan"])
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, examples=[30000])
    description: str = Field(..., min_length=10, max_length=1000)
    features: List[str] = Field(..., min_length=1, examples=[["High fiber content", "Fresh vegetables"]])
    icon: Optional[str] = Field(None, max_length=10, examples=["🥗"])


class MealPlanUpdateRequest(CamelModel):
    """Partial update; omitted fields keep their stored value."""

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    features: Optional[List[str]] = Field(None, min_length=1)
    icon: Optional[str] = Field(None, max_length=10)
    is_active: Optional[bool] = None


class MealPlanOut(CamelModel):
    id: int
    name: str
    price: float
    description: str
    features: List[str]
    icon: str
    is_active: bool


class MealPlanMutationResponse(CamelModel):
    message: str
    meal_plan: MealPlanOut
