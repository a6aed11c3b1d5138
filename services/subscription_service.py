"""Subscription lifecycle: creation, lookup and status transitions.

States are active, paused and cancelled. Cancelled is terminal. Every lookup
is scoped to the owning user, so a subscription that belongs to someone else
is reported as not found.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from core.auth import Principal
from core.enums import SubscriptionStatus
from core.exceptions import InvalidTransitionError, NotFoundError, SubscriptionLimitError, ValidationError
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from services import pricing

logger = get_logger("services.subscription_service")

MAX_ACTIVE_SUBSCRIPTIONS = 3

# Allowed (from, to) pairs. Same-state updates are handled separately.
ALLOWED_TRANSITIONS = {
    (SubscriptionStatus.ACTIVE, SubscriptionStatus.PAUSED),
    (SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED),
    (SubscriptionStatus.PAUSED, SubscriptionStatus.ACTIVE),
    (SubscriptionStatus.PAUSED, SubscriptionStatus.CANCELLED),
}


def parse_status(value) -> SubscriptionStatus:
    try:
        return SubscriptionStatus(value)
    except ValueError:
        raise ValidationError("Status must be active, paused, or cancelled", field="status")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_pause_window(paused_start: Optional[datetime], paused_end: Optional[datetime]) -> None:
    errors = []
    if paused_start is None:
        errors.append({"field": "pausedStart", "message": "Pause start date is required when pausing subscription"})
    if paused_end is None:
        errors.append({"field": "pausedEnd", "message": "Pause end date is required when pausing subscription"})
    if paused_start is not None and paused_end is not None and paused_end <= paused_start:
        errors.append({"field": "pausedEnd", "message": "Pause end date must be after start date"})
    if errors:
        raise ValidationError("Validation failed", errors=errors)


def reject_pause_window(target: SubscriptionStatus, paused_start: Optional[datetime],
                        paused_end: Optional[datetime]) -> None:
    """Pause dates are only accepted together with the `paused` status."""
    errors = [
        {"field": field, "message": f"Pause dates cannot be set when status is {target.value}"}
        for field, value in (("pausedStart", paused_start), ("pausedEnd", paused_end))
        if value is not None
    ]
    if errors:
        raise ValidationError("Validation failed", errors=errors)


def check_transition(current: SubscriptionStatus, target: SubscriptionStatus) -> None:
    if current == target:
        return
    if (current, target) not in ALLOWED_TRANSITIONS:
        raise InvalidTransitionError(current.value, target.value)


class SubscriptionService:
    """Operations on subscriptions for one request's session."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BaseRepository(models.Subscription, db)

    def count_active(self, user_id: int) -> int:
        return self.repo.count(
            models.Subscription.user_id == user_id,
            models.Subscription.status == SubscriptionStatus.ACTIVE,
        )

    def create(
        self,
        principal: Principal,
        plan_id: int,
        name: str,
        phone_number: str,
        meal_types: List[str],
        delivery_days: List[str],
        allergies: Optional[str] = None,
    ) -> models.Subscription:
        """Validate, price and store a new active subscription.

        The owning user's row is locked before the active count is read, so
        concurrent creations for the same user cannot exceed the cap.

        Raises:
            ValidationError: On any invalid order field.
            NotFoundError: If the plan is missing or retired, or the user no
                longer exists.
            SubscriptionLimitError: If the user already has the maximum number
                of active subscriptions.
        """
        order = pricing.validate_order(name, phone_number, meal_types, delivery_days, allergies)
        plan = pricing.get_active_plan(self.db, plan_id)
        total_price = pricing.price_order(plan, order.meal_types, order.delivery_days)

        try:
            owner = (
                self.db.query(models.User)
                .filter(models.User.id == principal.user_id)
                .with_for_update()
                .one_or_none()
            )
            if owner is None:
                raise NotFoundError("User", principal.user_id)

            active = self.count_active(principal.user_id)
            if active >= MAX_ACTIVE_SUBSCRIPTIONS:
                logger.info("User %s hit the active subscription cap (%s)", principal.user_id, active)
                raise SubscriptionLimitError(MAX_ACTIVE_SUBSCRIPTIONS)

            subscription = models.Subscription(
                user_id=principal.user_id,
                plan_id=plan.id,
                name=order.name,
                phone_number=order.phone_number,
                meal_types=order.meal_types,
                delivery_days=order.delivery_days,
                allergies=order.allergies,
                total_price=total_price,
                status=SubscriptionStatus.ACTIVE,
                paused_start=None,
                paused_end=None,
            )
            self.db.add(subscription)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(subscription)
        logger.info(
            "Subscription %s created for user %s on plan %s (total=%s)",
            subscription.id, principal.user_id, plan.id, total_price,
        )
        return subscription

    def list_for_user(self, principal: Principal) -> List[models.Subscription]:
        return (
            self.db.query(models.Subscription)
            .filter(models.Subscription.user_id == principal.user_id)
            .order_by(models.Subscription.created_at.desc(), models.Subscription.id.desc())
            .all()
        )

    def get_owned(self, principal: Principal, subscription_id: int) -> models.Subscription:
        """Fetch a subscription owned by the principal.

        Raises:
            NotFoundError: If it does not exist or belongs to another user.
        """
        subscription = (
            self.db.query(models.Subscription)
            .filter(
                models.Subscription.id == subscription_id,
                models.Subscription.user_id == principal.user_id,
            )
            .one_or_none()
        )
        if subscription is None:
            raise NotFoundError("Subscription", subscription_id)
        return subscription

    def update_status(
        self,
        principal: Principal,
        subscription_id: int,
        status,
        paused_start: Optional[datetime] = None,
        paused_end: Optional[datetime] = None,
    ) -> models.Subscription:
        """Move an owned subscription to `status`.

        Pausing stores the supplied window. Any other status clears it and
        refuses pause dates in the request.
        Setting the current status again is accepted and re-validates the
        supplied fields. Nothing is written when validation fails.
        """
        target = parse_status(status)
        subscription = self.get_owned(principal, subscription_id)
        current = SubscriptionStatus(subscription.status)

        check_transition(current, target)
        paused_start, paused_end = to_naive_utc(paused_start), to_naive_utc(paused_end)
        if target == SubscriptionStatus.PAUSED:
            validate_pause_window(paused_start, paused_end)
            subscription.paused_start = paused_start
            subscription.paused_end = paused_end
        else:
            reject_pause_window(target, paused_start, paused_end)
            subscription.paused_start = None
            subscription.paused_end = None
        subscription.status = target

        subscription = self.repo.update(subscription)
        logger.info("Subscription %s: %s -> %s", subscription.id, current.value, target.value)
        return subscription

    def list_all(self, page: int = 1, limit: int = 20) -> Tuple[List[models.Subscription], Dict[str, int]]:
        query = self.db.query(models.Subscription).order_by(
            models.Subscription.created_at.desc(), models.Subscription.id.desc()
        )
        return self.repo.paginate(query, page, limit)

    def stats(self) -> Dict[str, float]:
        """Counts per status and revenue summed over every subscription."""
        status = models.Subscription.status
        row = self.db.query(
            func.count(models.Subscription.id),
            func.coalesce(func.sum(models.Subscription.total_price), 0),
            func.sum(case((status == SubscriptionStatus.ACTIVE, 1), else_=0)),
            func.sum(case((status == SubscriptionStatus.PAUSED, 1), else_=0)),
            func.sum(case((status == SubscriptionStatus.CANCELLED, 1), else_=0)),
        ).one()
        return {
            "total_subscriptions": row[0] or 0,
            "total_revenue": float(row[1] or 0),
            "active_subscriptions": int(row[2] or 0),
            "paused_subscriptions": int(row[3] or 0),
            "cancelled_subscriptions": int(row[4] or 0),
        }
