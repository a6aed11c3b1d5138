"""Meal-plan catalog router.

Reads are public. Create, update and delete require an admin role and a
CSRF token; delete retires the plan.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from core.auth import Principal, get_principal_if_valid, require_admin
from core.csrf import verify_csrf
from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas.base import MessageResponse
from schemas.meal_plan_schema import (
    MealPlanCreateRequest,
    MealPlanMutationResponse,
    MealPlanOut,
    MealPlanUpdateRequest,
)
from services import catalog_service

logger = get_logger("api.meal_plans")
router = APIRouter(prefix="/meal-plans", tags=["meal-plans"])


@router.get("", response_model=List[MealPlanOut])
def list_meal_plans(
    include_inactive: bool = Query(False, alias="includeInactive"),
    principal: Optional[Principal] = Depends(get_principal_if_valid),
    db: Session = Depends(get_db_read),
):
    """List offered plans, cheapest first.

    `includeInactive=true` also returns retired plans and is admin-only.
    """
    return catalog_service.list_plans(db, include_inactive, principal)


@router.get("/{plan_id}", response_model=MealPlanOut)
def get_meal_plan(
    plan_id: int,
    include_inactive: bool = Query(False, alias="includeInactive"),
    principal: Optional[Principal] = Depends(get_principal_if_valid),
    db: Session = Depends(get_db_read),
):
    return catalog_service.get_plan(db, plan_id, include_inactive, principal)


@router.post("", response_model=MealPlanMutationResponse, status_code=201, dependencies=[Depends(verify_csrf)])
def create_meal_plan(
    payload: MealPlanCreateRequest,
    db: Session = Depends(get_db_write),
    _: Principal = Depends(require_admin),
):
    plan = catalog_service.create_plan(db, payload)
    return MealPlanMutationResponse(message="Meal plan created successfully",
                                    meal_plan=MealPlanOut.model_validate(plan))


@router.put("/{plan_id}", response_model=MealPlanMutationResponse, dependencies=[Depends(verify_csrf)])
def update_meal_plan(
    plan_id: int,
    payload: MealPlanUpdateRequest,
    db: Session = Depends(get_db_write),
    _: Principal = Depends(require_admin),
):
    plan = catalog_service.update_plan(db, plan_id, payload)
    return MealPlanMutationResponse(message="Meal plan updated successfully",
                                    meal_plan=MealPlanOut.model_validate(plan))


@router.delete("/{plan_id}", response_model=MessageResponse, dependencies=[Depends(verify_csrf)])
def delete_meal_plan(
    plan_id: int,
    db: Session = Depends(get_db_write),
    _: Principal = Depends(require_admin),
):
    """Retire a plan. Existing subscriptions keep referencing it."""
    catalog_service.retire_plan(db, plan_id)
    return MessageResponse(message="Meal plan deleted successfully")
