"""Tests for subscription pricing and order validation."""
from decimal import Decimal

import pytest

from conftest import make_plan
from core.exceptions import NotFoundError, ValidationError
from services import pricing


def test_price_for_two_meals_three_days():
    """30000 x 2 meals x 3 days x 4.3 weeks = 774000."""
    assert pricing.calculate_total_price(Decimal("30000"), 2, 3) == Decimal("774000.00")


@pytest.mark.parametrize("unit_price,meals,days,expected", [
    ("40000", 1, 1, "172000.00"),
    ("60000", 3, 7, "5418000.00"),
    ("12.34", 1, 1, "53.06"),
    ("0.01", 1, 5, "0.22"),
])
def test_price_is_rounded_to_cents(unit_price, meals, days, expected):
    assert pricing.calculate_total_price(Decimal(unit_price), meals, days) == Decimal(expected)


def test_validate_order_normalizes_fields():
    order = pricing.validate_order(
        "  Jane <b>Doe</b> ",
        "081234567890",
        ["Breakfast", "Dinner"],
        ["Monday"],
        "  <script>peanuts</script> ",
    )
    assert order.name == "Jane bDoe/b"
    assert order.allergies == "scriptpeanuts/script"
    assert order.meal_types == ["Breakfast", "Dinner"]
    assert order.delivery_days == ["Monday"]


def test_validate_order_reports_every_violation():
    with pytest.raises(ValidationError) as exc_info:
        pricing.validate_order("J", "12345", [], ["Funday", "Monday"], "x" * 501)

    fields = [e["field"] for e in exc_info.value.errors]
    assert set(fields) == {"name", "phoneNumber", "mealTypes", "deliveryDays", "allergies"}
    assert exc_info.value.status_code == 400


def test_validate_order_rejects_too_many_and_duplicate_meal_types():
    with pytest.raises(ValidationError) as exc_info:
        pricing.validate_order("Jane", "081234567890", ["Breakfast", "Lunch", "Dinner", "Lunch"], ["Monday"])

    messages = [e["message"] for e in exc_info.value.errors if e["field"] == "mealTypes"]
    assert any("1-3" in m for m in messages)
    assert any("Duplicate" in m for m in messages)


def test_validate_order_accepts_all_seven_days():
    days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    order = pricing.validate_order("Jane", "+6281234567890", ["Lunch"], days)
    assert len(order.delivery_days) == 7
    assert order.allergies == ""


def test_get_active_plan_rejects_retired_and_missing(db):
    active = make_plan(db)
    retired = make_plan(db, name="Old Plan", active=False)

    assert pricing.get_active_plan(db, active.id).id == active.id
    with pytest.raises(NotFoundError):
        pricing.get_active_plan(db, retired.id)
    with pytest.raises(NotFoundError):
        pricing.get_active_plan(db, 9999)
