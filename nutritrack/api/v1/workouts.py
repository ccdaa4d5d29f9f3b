import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.db import get_db
from nutritrack.core.dependencies import (
    get_current_user, get_user_repository, get_workout_repository,
    get_workout_aggregator, get_audit_service,
)
from nutritrack.core.errors import AppError, Internal, NotFoundOrForbidden, ValidationFailure
from nutritrack.core.responses import success
from nutritrack.models.activity_log import ActivityType
from nutritrack.models.workout import Workout, WorkoutExercise, Exercise
from nutritrack.repositories.user_repository import UserRepository
from nutritrack.repositories.workout_repository import WorkoutRepository
from nutritrack.schemas.auth import CurrentUser
from nutritrack.schemas.workout import (
    WorkoutCreate, WorkoutExerciseCreate, WorkoutRead, WorkoutDetail, ExerciseRead,
)
from nutritrack.services.aggregates import WorkoutAggregator
from nutritrack.services.audit import AuditService
from nutritrack.services.nutrition_calculator import NutritionCalculator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workouts"])


def build_exercise_entry(
        workout_id: int,
        order: int,
        data: WorkoutExerciseCreate,
        exercise: Exercise,
        user_weight: Optional[float],
) -> WorkoutExercise:
    """Line item for a workout; calories are estimated when only a duration is given."""
    calories = data.calories_burned
    if calories is None:
        calories = NutritionCalculator.calculate_calories_burned(
            exercise.calories_per_minute, data.duration, user_weight
        )

    fields = data.model_dump(exclude={"calories_burned"})
    return WorkoutExercise(
        workout_id=workout_id,
        exercise_order=order,
        calories_burned=calories,
        **fields,
    )


@router.get("/", response_model=dict)
async def list_workouts(
        workout_date: Optional[date] = Query(None, alias="date"),
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        current_user: CurrentUser = Depends(get_current_user),
        repo: WorkoutRepository = Depends(get_workout_repository),
):
    rows, total = await repo.list_for_user(current_user.user_id, workout_date, limit, offset)
    workouts = [
        {**WorkoutRead.model_validate(workout).model_dump(), "exercise_count": count}
        for workout, count in rows
    ]
    return success(workouts, limit=limit, offset=offset, total=total)


@router.get("/exercises/search", response_model=dict)
async def search_exercises(
        q: Optional[str] = Query(None),
        category: Optional[str] = Query(None),
        difficulty: Optional[str] = Query(None),
        limit: int = Query(20, ge=1, le=100),
        repo: WorkoutRepository = Depends(get_workout_repository),
):
    if not q or not q.strip():
        raise ValidationFailure("Search query is required")

    exercises = await repo.search_exercises(q.strip(), category, difficulty, limit)
    return success([ExerciseRead.model_validate(e) for e in exercises])


@router.get("/stats/summary", response_model=dict)
async def workout_stats(
        period: int = Query(30, ge=1, le=3650),
        current_user: CurrentUser = Depends(get_current_user),
        repo: WorkoutRepository = Depends(get_workout_repository),
):
    """Totals over the last `period` days and the five most used exercises."""
    since = date.today() - timedelta(days=period)
    summary = await repo.period_stats(current_user.user_id, since)
    favorites = await repo.favorite_exercises(current_user.user_id, since)
    return success({
        "summary": summary,
        "favorite_exercises": favorites,
        "period_days": period,
    })


@router.get("/{workout_id}", response_model=dict)
async def get_workout(
        workout_id: int,
        current_user: CurrentUser = Depends(get_current_user),
        repo: WorkoutRepository = Depends(get_workout_repository),
):
    workout = await repo.get_owned(workout_id, current_user.user_id, with_exercises=True)
    if workout is None:
        raise NotFoundOrForbidden("Workout")
    return success(WorkoutDetail.model_validate(workout))


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=dict)
async def create_workout(
        data: WorkoutCreate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: WorkoutRepository = Depends(get_workout_repository),
        users: UserRepository = Depends(get_user_repository),
        aggregator: WorkoutAggregator = Depends(get_workout_aggregator),
        audit: AuditService = Depends(get_audit_service),
):
    requested = {entry.exercise_id for entry in data.exercises}
    catalog = await repo.get_exercises(requested)
    missing = sorted(requested - catalog.keys())
    if missing:
        raise ValidationFailure(
            "One or more exercises do not exist",
            details={"exercise_ids": missing},
        )

    try:
        workout = await repo.create_workout(Workout(
            user_id=current_user.user_id,
            workout_date=data.workout_date,
            workout_name=data.workout_name,
            workout_intensity=data.workout_intensity,
            notes=data.notes,
        ))

        user_weight = await users.get_current_weight(current_user.user_id) if data.exercises else None
        for position, entry in enumerate(data.exercises, start=1):
            await repo.add_exercise(build_exercise_entry(
                workout.id, position, entry, catalog[entry.exercise_id], user_weight
            ))

        await aggregator.recompute_totals(workout.id)
        await audit.record(
            current_user.user_id,
            ActivityType.workout_log,
            f"Logged workout {data.workout_name or data.workout_date.isoformat()}",
        )
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Workout creation failed for user %s", current_user.user_id)
        raise Internal("Failed to create workout")

    workout = await repo.get_owned(workout.id, current_user.user_id, with_exercises=True)
    return success(WorkoutDetail.model_validate(workout), "Workout logged successfully")


@router.post("/{workout_id}/exercises", status_code=status.HTTP_201_CREATED, response_model=dict)
async def add_workout_exercise(
        workout_id: int,
        data: WorkoutExerciseCreate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: WorkoutRepository = Depends(get_workout_repository),
        users: UserRepository = Depends(get_user_repository),
        aggregator: WorkoutAggregator = Depends(get_workout_aggregator),
        audit: AuditService = Depends(get_audit_service),
):
    workout = await repo.get_owned(workout_id, current_user.user_id)
    if workout is None:
        raise NotFoundOrForbidden("Workout")

    exercise = await repo.get_exercise(data.exercise_id)
    if exercise is None:
        raise NotFoundOrForbidden("Exercise")

    try:
        order = await repo.next_exercise_order(workout.id)
        user_weight = await users.get_current_weight(current_user.user_id)
        await repo.add_exercise(build_exercise_entry(workout.id, order, data, exercise, user_weight))
        await aggregator.recompute_totals(workout.id)
        await audit.record(
            current_user.user_id,
            ActivityType.workout_log,
            f"Added {exercise.exercise_name} to workout {workout.id}",
        )
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Adding exercise to workout %s failed", workout_id)
        raise Internal("Failed to add exercise")

    workout = await repo.get_owned(workout.id, current_user.user_id, with_exercises=True)
    return success(WorkoutDetail.model_validate(workout), "Exercise added successfully")
