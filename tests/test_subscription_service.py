"""Tests for the subscription lifecycle service."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import make_plan, make_user, principal_for
from core.enums import SubscriptionStatus
from core.exceptions import InvalidTransitionError, NotFoundError, SubscriptionLimitError, ValidationError
from database import models
from services.subscription_service import MAX_ACTIVE_SUBSCRIPTIONS, SubscriptionService

START = datetime(2026, 11, 1, 0, 0, 0)
END = datetime(2026, 11, 15, 0, 0, 0)


def _create(service, principal, plan, **overrides):
    kwargs = dict(
        plan_id=plan.id,
        name="Jane Doe",
        phone_number="081234567890",
        meal_types=["Breakfast", "Lunch"],
        delivery_days=["Monday", "Wednesday", "Friday"],
        allergies="Peanuts",
    )
    kwargs.update(overrides)
    return service.create(principal, **kwargs)


def test_create_prices_and_activates(db):
    user = make_user(db)
    plan = make_plan(db, price=30000)
    subscription = _create(SubscriptionService(db), principal_for(user), plan)

    assert subscription.total_price == Decimal("774000.00")
    assert subscription.status == SubscriptionStatus.ACTIVE
    assert subscription.paused_start is None and subscription.paused_end is None
    assert subscription.user_id == user.id
    assert subscription.plan_id == plan.id


def test_create_then_fetch_round_trip(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    created = _create(service, principal_for(user), plan, meal_types=["Dinner"], delivery_days=["Sunday"])

    fetched = service.get_owned(principal_for(user), created.id)
    assert fetched.meal_types == ["Dinner"]
    assert fetched.delivery_days == ["Sunday"]
    assert fetched.allergies == "Peanuts"
    assert fetched.status == SubscriptionStatus.ACTIVE


def test_fourth_active_subscription_is_rejected(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    for _ in range(MAX_ACTIVE_SUBSCRIPTIONS):
        _create(service, principal, plan)

    with pytest.raises(SubscriptionLimitError):
        _create(service, principal, plan)
    assert db.query(models.Subscription).filter(models.Subscription.user_id == user.id).count() == 3


def test_cancelled_subscriptions_free_a_slot(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    first = _create(service, principal, plan)
    _create(service, principal, plan)
    _create(service, principal, plan)

    service.update_status(principal, first.id, "cancelled")
    fourth = _create(service, principal, plan)
    assert fourth.status == SubscriptionStatus.ACTIVE
    assert service.count_active(user.id) == 3


def test_create_against_retired_plan_fails(db):
    user = make_user(db)
    plan = make_plan(db, active=False)
    with pytest.raises(NotFoundError):
        _create(SubscriptionService(db), principal_for(user), plan)


def test_other_users_cannot_see_or_change_subscription(db):
    owner = make_user(db, email="owner@example.com")
    intruder = make_user(db, email="intruder@example.com")
    plan = make_plan(db)
    service = SubscriptionService(db)
    subscription = _create(service, principal_for(owner), plan)

    with pytest.raises(NotFoundError):
        service.get_owned(principal_for(intruder), subscription.id)
    with pytest.raises(NotFoundError):
        service.update_status(principal_for(intruder), subscription.id, "cancelled")
    assert service.get_owned(principal_for(owner), subscription.id).status == SubscriptionStatus.ACTIVE


def test_pause_stores_window_and_resume_clears_it(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)

    paused = service.update_status(principal, subscription.id, "paused", START, END)
    assert paused.status == SubscriptionStatus.PAUSED
    assert paused.paused_start == START and paused.paused_end == END

    resumed = service.update_status(principal, subscription.id, "active")
    assert resumed.status == SubscriptionStatus.ACTIVE
    assert resumed.paused_start is None and resumed.paused_end is None


@pytest.mark.parametrize("start,end", [(START, START), (END, START), (START, None), (None, END)])
def test_invalid_pause_window_leaves_status_unchanged(db, start, end):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)

    with pytest.raises(ValidationError):
        service.update_status(principal, subscription.id, "paused", start, end)

    db.expire_all()
    stored = service.get_owned(principal, subscription.id)
    assert stored.status == SubscriptionStatus.ACTIVE
    assert stored.paused_start is None and stored.paused_end is None


def test_timezone_aware_pause_dates_are_stored_as_utc(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)

    plus7 = timezone(timedelta(hours=7))
    paused = service.update_status(
        principal, subscription.id, "paused",
        datetime(2026, 11, 1, 7, 0, tzinfo=plus7), datetime(2026, 11, 2, 7, 0, tzinfo=plus7),
    )
    assert paused.paused_start == datetime(2026, 11, 1, 0, 0)
    assert paused.paused_end == datetime(2026, 11, 2, 0, 0)


def test_setting_same_status_twice_is_idempotent(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)

    states = []
    for _ in range(2):
        s = service.update_status(principal, subscription.id, "paused", START, END)
        states.append((s.status, s.paused_start, s.paused_end, s.total_price))
    assert states[0] == states[1]


def test_cancelled_is_terminal(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)
    service.update_status(principal, subscription.id, "cancelled")

    with pytest.raises(InvalidTransitionError):
        service.update_status(principal, subscription.id, "active")
    with pytest.raises(InvalidTransitionError):
        service.update_status(principal, subscription.id, "paused", START, END)

    again = service.update_status(principal, subscription.id, "cancelled")
    assert again.status == SubscriptionStatus.CANCELLED


def test_unknown_status_is_a_validation_error(db):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)

    with pytest.raises(ValidationError) as exc_info:
        service.update_status(principal, subscription.id, "expired")
    assert exc_info.value.errors[0]["field"] == "status"


def test_plan_price_change_does_not_reprice_existing_subscription(db):
    user = make_user(db)
    plan = make_plan(db, price=30000)
    service = SubscriptionService(db)
    subscription = _create(service, principal_for(user), plan)

    plan.price = Decimal("99999")
    db.commit()
    db.refresh(subscription)
    assert subscription.total_price == Decimal("774000.00")


def test_stats_aggregate_by_status(db):
    user = make_user(db)
    plan = make_plan(db, price=10000)
    service = SubscriptionService(db)
    principal = principal_for(user)
    a = _create(service, principal, plan, meal_types=["Lunch"], delivery_days=["Monday"])
    b = _create(service, principal, plan, meal_types=["Lunch"], delivery_days=["Monday"])
    _create(service, principal, plan, meal_types=["Lunch"], delivery_days=["Monday"])
    service.update_status(principal, a.id, "paused", START, END)
    service.update_status(principal, b.id, "cancelled")

    stats = service.stats()
    assert stats["total_subscriptions"] == 3
    assert stats["active_subscriptions"] == 1
    assert stats["paused_subscriptions"] == 1
    assert stats["cancelled_subscriptions"] == 1
    assert stats["total_revenue"] == pytest.approx(3 * 43000.0)


@pytest.mark.parametrize("status", ["active", "cancelled"])
def test_pause_dates_are_refused_for_other_statuses(db, status):
    user = make_user(db)
    plan = make_plan(db)
    service = SubscriptionService(db)
    principal = principal_for(user)
    subscription = _create(service, principal, plan)

    with pytest.raises(ValidationError) as exc_info:
        service.update_status(principal, subscription.id, status, START, None)
    assert [e["field"] for e in exc_info.value.errors] == ["pausedStart"]

    db.expire_all()
    assert service.get_owned(principal, subscription.id).status == SubscriptionStatus.ACTIVE
