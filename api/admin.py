"""Admin reporting router: all subscriptions, subscription stats, dashboard."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import Principal, require_admin
from core.enums import SubscriptionStatus
from core.logger import get_logger
from database import models
from database.deps import get_db_read
from schemas.subscription_schema import (
    DashboardStats,
    Pagination,
    SubscriptionOut,
    SubscriptionPage,
    SubscriptionStats,
    SubscriptionStatsResponse,
)
from services.subscription_service import SubscriptionService

logger = get_logger("api.admin")
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/subscriptions", response_model=SubscriptionPage)
def list_all_subscriptions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db_read),
    _: Principal = Depends(require_admin),
):
    """Return every user's subscriptions, newest first, one page at a time."""
    rows, pagination = SubscriptionService(db).list_all(page, limit)
    return SubscriptionPage(
        subscriptions=[SubscriptionOut.model_validate(r) for r in rows],
        pagination=Pagination(
            total=pagination["total"],
            page=pagination["page"],
            limit=pagination["limit"],
            total_pages=pagination["totalPages"],
        ),
    )


@router.get("/subscriptions/stats", response_model=SubscriptionStatsResponse)
def subscription_stats(db: Session = Depends(get_db_read), _: Principal = Depends(require_admin)):
    return SubscriptionStatsResponse(overall_stats=SubscriptionStats(**SubscriptionService(db).stats()))


@router.get("/dashboard/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db_read), _: Principal = Depends(require_admin)):
    """Headline counts for the admin dashboard."""
    return DashboardStats(
        total_users=db.query(models.User).count(),
        active_meal_plans=db.query(models.MealPlan).filter(models.MealPlan.is_active).count(),
        active_subscriptions=db.query(models.Subscription).filter(
            models.Subscription.status == SubscriptionStatus.ACTIVE).count(),
        approved_testimonials=db.query(models.Testimonial).filter(
            models.Testimonial.is_approved.is_(True)).count(),
        timestamp=datetime.utcnow(),
    )
