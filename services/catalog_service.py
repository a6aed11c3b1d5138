"""Meal-plan catalog reads and admin mutations.

Public reads only ever see active plans. Admins may ask for retired plans
explicitly. Deleting a plan retires it.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from core.auth import Principal
from core.enums import PlanLifecycle
from core.exceptions import AuthorizationError, NotFoundError
from core.logger import get_logger
from core.repository import BaseRepository
from database import models
from schemas.meal_plan_schema import MealPlanCreateRequest, MealPlanUpdateRequest
from services.pricing import sanitize_text

logger = get_logger("services.catalog_service")

DEFAULT_ICON = "🍽️"


def _check_include_inactive(include_inactive: bool, principal: Optional[Principal]) -> None:
    if include_inactive and (principal is None or not principal.is_admin):
        raise AuthorizationError("Only administrators can view retired meal plans")


def list_plans(db: Session, include_inactive: bool = False, principal: Optional[Principal] = None) -> List[models.MealPlan]:
    _check_include_inactive(include_inactive, principal)
    query = db.query(models.MealPlan)
    if not include_inactive:
        query = query.filter(models.MealPlan.is_active)
    return query.order_by(models.MealPlan.price.asc(), models.MealPlan.id.asc()).all()


def get_plan(db: Session, plan_id: int, include_inactive: bool = False,
             principal: Optional[Principal] = None) -> models.MealPlan:
    _check_include_inactive(include_inactive, principal)
    plan = db.get(models.MealPlan, plan_id)
    if plan is None or (not include_inactive and not plan.is_active):
        raise NotFoundError("MealPlan", plan_id)
    return plan


def create_plan(db: Session, payload: MealPlanCreateRequest) -> models.MealPlan:
    plan = models.MealPlan(
        name=sanitize_text(payload.name),
        price=payload.price,
        description=sanitize_text(payload.description),
        features=[sanitize_text(f) for f in payload.features],
        icon=payload.icon or DEFAULT_ICON,
        lifecycle=PlanLifecycle.ACTIVE,
    )
    plan = BaseRepository(models.MealPlan, db).create(plan)
    logger.info("Meal plan %s created (%s)", plan.id, plan.name)
    return plan


def update_plan(db: Session, plan_id: int, payload: MealPlanUpdateRequest) -> models.MealPlan:
    """Apply a partial update. Prices of existing subscriptions are not touched."""
    repo = BaseRepository(models.MealPlan, db)
    plan = repo.get_by_id(plan_id)
    if plan is None:
        raise NotFoundError("MealPlan", plan_id)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        plan.name = sanitize_text(changes["name"])
    if "price" in changes:
        plan.price = changes["price"]
    if "description" in changes:
        plan.description = sanitize_text(changes["description"])
    if "features" in changes:
        plan.features = [sanitize_text(f) for f in changes["features"]]
    if "icon" in changes:
        plan.icon = changes["icon"]
    if "is_active" in changes:
        plan.lifecycle = PlanLifecycle.ACTIVE if changes["is_active"] else PlanLifecycle.RETIRED

    plan = repo.update(plan)
    logger.info("Meal plan %s updated: %s", plan.id, sorted(changes))
    return plan


def retire_plan(db: Session, plan_id: int) -> models.MealPlan:
    repo = BaseRepository(models.MealPlan, db)
    plan = repo.get_by_id(plan_id)
    if plan is None:
        raise NotFoundError("MealPlan", plan_id)
    plan.lifecycle = PlanLifecycle.RETIRED
    plan = repo.update(plan)
    logger.info("Meal plan %s retired", plan.id)
    return plan
