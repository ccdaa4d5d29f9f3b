import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.db import get_db
from nutritrack.core.dependencies import (
    get_current_user, get_meal_repository, get_meal_aggregator, get_audit_service,
)
from nutritrack.core.errors import AppError, Internal, NotFoundOrForbidden, ValidationFailure
from nutritrack.core.responses import success
from nutritrack.models.activity_log import ActivityType
from nutritrack.models.meal import Meal
from nutritrack.repositories.meal_repository import MealRepository
from nutritrack.schemas.auth import CurrentUser
from nutritrack.schemas.meal import (
    MealCreate, MealItemCreate, MealRead, MealDetail, FoodItemRead, DailySummary,
)
from nutritrack.services.aggregates import MealAggregator
from nutritrack.services.audit import AuditService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meals"])


@router.get("/", response_model=dict)
async def list_meals(
        meal_date: Optional[date] = Query(None, alias="date"),
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        current_user: CurrentUser = Depends(get_current_user),
        repo: MealRepository = Depends(get_meal_repository),
):
    meals, total = await repo.list_for_user(current_user.user_id, meal_date, limit, offset)
    return success(
        [MealRead.model_validate(m) for m in meals],
        limit=limit,
        offset=offset,
        total=total,
    )


@router.get("/foods/search", response_model=dict)
async def search_foods(
        q: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        limit: int = Query(20, ge=1, le=100),
        repo: MealRepository = Depends(get_meal_repository),
):
    """Public catalog lookup, verified entries first."""
    if not q or not q.strip():
        raise ValidationFailure("Search query is required")

    foods = await repo.search_foods(q.strip(), category, limit)
    return success([FoodItemRead.model_validate(f) for f in foods])


@router.get("/summary/{summary_date}", response_model=dict)
async def daily_summary(
        summary_date: date,
        current_user: CurrentUser = Depends(get_current_user),
        repo: MealRepository = Depends(get_meal_repository),
):
    totals = await repo.daily_summary(current_user.user_id, summary_date)
    summary = DailySummary(
        summary_date=summary_date,
        daily_calories=totals["calories"],
        daily_protein=totals["protein"],
        daily_carbs=totals["carbs"],
        daily_fat=totals["fat"],
        meals_logged=totals["meals_logged"],
    )
    return success(summary)


@router.get("/{meal_id}", response_model=dict)
async def get_meal(
        meal_id: int,
        current_user: CurrentUser = Depends(get_current_user),
        repo: MealRepository = Depends(get_meal_repository),
):
    meal = await repo.get_owned(meal_id, current_user.user_id, with_items=True)
    if meal is None:
        raise NotFoundOrForbidden("Meal")
    return success(MealDetail.model_validate(meal))


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=dict)
async def create_meal(
        data: MealCreate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: MealRepository = Depends(get_meal_repository),
        aggregator: MealAggregator = Depends(get_meal_aggregator),
        audit: AuditService = Depends(get_audit_service),
):
    """Meal plus nested items in one transaction, totals recomputed before commit."""
    requested = {item.food_id for item in data.food_items}
    foods = await repo.get_foods(requested)
    missing = sorted(requested - foods.keys())
    if missing:
        raise ValidationFailure(
            "One or more food items do not exist",
            details={"food_ids": missing},
        )

    try:
        meal = await repo.create_meal(Meal(
            user_id=current_user.user_id,
            meal_type=data.meal_type,
            meal_date=data.meal_date,
            meal_time=data.meal_time,
            notes=data.notes,
        ))
        for item in data.food_items:
            await repo.add_item(meal.id, foods[item.food_id], item.quantity, item.serving_unit)

        await aggregator.recompute_totals(meal.id)
        await audit.record(
            current_user.user_id,
            ActivityType.meal_log,
            f"Logged {data.meal_type.value} with {len(data.food_items)} items",
        )
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Meal creation failed for user %s", current_user.user_id)
        raise Internal("Failed to create meal")

    meal = await repo.get_owned(meal.id, current_user.user_id, with_items=True)
    return success(MealDetail.model_validate(meal), "Meal logged successfully")


@router.post("/{meal_id}/items", status_code=status.HTTP_201_CREATED, response_model=dict)
async def add_meal_item(
        meal_id: int,
        data: MealItemCreate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: MealRepository = Depends(get_meal_repository),
        aggregator: MealAggregator = Depends(get_meal_aggregator),
        audit: AuditService = Depends(get_audit_service),
):
    meal = await repo.get_owned(meal_id, current_user.user_id)
    if meal is None:
        raise NotFoundOrForbidden("Meal")

    food = await repo.get_food(data.food_id)
    if food is None:
        raise NotFoundOrForbidden("Food item")

    try:
        await repo.add_item(meal.id, food, data.quantity, data.serving_unit)
        await aggregator.recompute_totals(meal.id)
        await audit.record(
            current_user.user_id,
            ActivityType.meal_log,
            f"Added {food.food_name} to meal {meal.id}",
        )
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Adding item to meal %s failed", meal_id)
        raise Internal("Failed to add food item")

    meal = await repo.get_owned(meal.id, current_user.user_id, with_items=True)
    return success(MealDetail.model_validate(meal), "Food item added successfully")
