"""Subscription pricing and order validation.

`validate_order` collects every field violation before raising so clients
get the full list in one response. `calculate_total_price` is the monthly
price formula used when a subscription is created.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from core.enums import MealType, DeliveryDay
from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from database import models

logger = get_logger("services.pricing")

# Average number of weeks in a month.
WEEKS_PER_MONTH = Decimal("4.3")
CENTS = Decimal("0.01")

MAX_MEAL_TYPES = len(MealType)
MAX_DELIVERY_DAYS = len(DeliveryDay)
MAX_ALLERGIES_LENGTH = 500
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PHONE_PATTERN = re.compile(r"^(\+62|62|0)8[1-9][0-9]{6,9}$")

_MEAL_TYPE_VALUES = [m.value for m in MealType]
_DELIVERY_DAY_VALUES = [d.value for d in DeliveryDay]


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """Trim whitespace and strip HTML angle brackets."""
    if value is None:
        return None
    return re.sub(r"[<>]", "", value.strip())


@dataclass(frozen=True)
class ValidatedOrder:
    """Normalized subscription order, ready to price and persist."""

    name: str
    phone_number: str
    meal_types: List[str]
    delivery_days: List[str]
    allergies: str


def _check_choices(field: str, values: Sequence[str], allowed: List[str], maximum: int, label: str) -> List[dict]:
    errors = []
    if not values:
        errors.append({"field": field, "message": f"At least one {label} is required"})
        return errors
    if len(values) > maximum:
        errors.append({"field": field, "message": f"Select 1-{maximum} {label}s"})
    invalid = [v for v in values if v not in allowed]
    if invalid:
        errors.append({"field": field, "message": f"Invalid {label} selected: {', '.join(map(str, invalid))}"})
    if len(set(values)) != len(values):
        errors.append({"field": field, "message": f"Duplicate {label} selected"})
    return errors


def validate_order(
    name: str,
    phone_number: str,
    meal_types: Sequence[str],
    delivery_days: Sequence[str],
    allergies: Optional[str] = None,
) -> ValidatedOrder:
    """Validate and normalize a subscription order.

    Raises:
        ValidationError: With one entry per violated field rule.
    """
    errors = []

    clean_name = sanitize_text(name) or ""
    if not NAME_MIN_LENGTH <= len(clean_name) <= NAME_MAX_LENGTH:
        errors.append({"field": "name", "message": "Name must be between 2 and 100 characters"})

    phone = (phone_number or "").strip()
    if not PHONE_PATTERN.match(phone):
        errors.append({"field": "phoneNumber", "message": "Please enter a valid Indonesian phone number"})

    meal_types = list(meal_types or [])
    delivery_days = list(delivery_days or [])
    errors.extend(_check_choices("mealTypes", meal_types, _MEAL_TYPE_VALUES, MAX_MEAL_TYPES, "meal type"))
    errors.extend(_check_choices("deliveryDays", delivery_days, _DELIVERY_DAY_VALUES, MAX_DELIVERY_DAYS, "delivery day"))

    clean_allergies = sanitize_text(allergies) or ""
    if len(clean_allergies) > MAX_ALLERGIES_LENGTH:
        errors.append({"field": "allergies",
                       "message": f"Allergies description must be less than {MAX_ALLERGIES_LENGTH} characters"})

    if errors:
        raise ValidationError("Validation failed", errors=errors)

    return ValidatedOrder(
        name=clean_name,
        phone_number=phone,
        meal_types=meal_types,
        delivery_days=delivery_days,
        allergies=clean_allergies,
    )


def calculate_total_price(unit_price, meal_type_count: int, delivery_day_count: int) -> Decimal:
    """Monthly price: unit price x meals per day x days per week x 4.3, to 2 decimals."""
    total = Decimal(str(unit_price)) * meal_type_count * delivery_day_count * WEEKS_PER_MONTH
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def price_order(plan: models.MealPlan, meal_types: Iterable[str], delivery_days: Iterable[str]) -> Decimal:
    return calculate_total_price(plan.price, len(list(meal_types)), len(list(delivery_days)))


def get_active_plan(db: Session, plan_id: int) -> models.MealPlan:
    """Load a plan that is currently offered.

    Raises:
        NotFoundError: If the plan does not exist or has been retired.
    """
    plan = db.query(models.MealPlan).filter(
        models.MealPlan.id == plan_id,
        models.MealPlan.is_active,
    ).one_or_none()
    if plan is None:
        logger.info("Plan %s missing or retired", plan_id)
        raise NotFoundError("MealPlan", plan_id)
    return plan
