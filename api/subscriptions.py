"""Subscription router for the signed-in customer.

Every endpoint is scoped to the caller's own subscriptions; someone else's
subscription id answers 404.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from core.auth import Principal, get_current_principal
from core.csrf import verify_csrf
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas.subscription_schema import (
    SubscriptionCreateRequest,
    SubscriptionCreateResponse,
    SubscriptionOut,
    SubscriptionStatusResponse,
    SubscriptionStatusUpdateRequest,
)
from services.subscription_service import SubscriptionService

logger = get_logger("api.subscriptions")
router = APIRouter(tags=["subscriptions"])


@router.post("/subscriptions", response_model=SubscriptionCreateResponse, status_code=201,
             dependencies=[Depends(verify_csrf)])
def create_subscription(
    payload: SubscriptionCreateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_write),
):
    """Create an active subscription priced from the chosen plan.

    Raises:
        ValidationError: If any order field is invalid.
        NotFoundError: If the plan does not exist or is retired.
        SubscriptionLimitError: If the caller already has 3 active subscriptions.
    """
    subscription = SubscriptionService(db).create(
        principal,
        plan_id=payload.plan_id,
        name=payload.name,
        phone_number=payload.phone_number,
        meal_types=payload.meal_types,
        delivery_days=payload.delivery_days,
        allergies=payload.allergies,
    )
    return SubscriptionCreateResponse(
        message="Subscription created successfully",
        subscription_id=subscription.id,
        total_price=subscription.total_price,
        subscription=SubscriptionOut.model_validate(subscription),
    )


@router.get("/my-subscriptions", response_model=List[SubscriptionOut])
def list_my_subscriptions(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db_read)):
    """Return the caller's subscriptions, newest first."""
    return SubscriptionService(db).list_for_user(principal)


@router.get("/subscriptions/{subscription_id}", response_model=SubscriptionOut)
def get_subscription(
    subscription_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_read),
):
    return SubscriptionService(db).get_owned(principal, subscription_id)


@router.put("/subscriptions/{subscription_id}/status", response_model=SubscriptionStatusResponse,
            dependencies=[Depends(verify_csrf)])
def update_subscription_status(
    subscription_id: int,
    payload: SubscriptionStatusUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db_write),
):
    """Pause, resume or cancel one of the caller's subscriptions.

    Raises:
        ValidationError: On an unknown status or an invalid pause window.
        InvalidTransitionError: When leaving the cancelled state.
        NotFoundError: If the subscription is not the caller's.
    """
    subscription = SubscriptionService(db).update_status(
        principal,
        subscription_id,
        payload.status,
        paused_start=payload.paused_start,
        paused_end=payload.paused_end,
    )
    return SubscriptionStatusResponse(
        message=f"Subscription {subscription.status.value} successfully",
        subscription=SubscriptionOut.model_validate(subscription),
    )
