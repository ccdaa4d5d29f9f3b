import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.db import get_db
from nutritrack.core.dependencies import get_current_user, get_goal_repository, get_audit_service
from nutritrack.core.errors import AppError, Internal, NotFoundOrForbidden, ValidationFailure
from nutritrack.core.responses import success
from nutritrack.models.activity_log import ActivityType
from nutritrack.models.goal import Goal, GoalStatus
from nutritrack.repositories.goal_repository import GoalRepository
from nutritrack.schemas.auth import CurrentUser
from nutritrack.schemas.goal import (
    GoalCreate, GoalProgressUpdate, GoalStatusUpdate,
    GoalRead, GoalDetail, ProgressRecordRead,
)
from nutritrack.services.audit import AuditService
from nutritrack.services.goal_service import (
    ACTIVE_GOAL_LIMIT, apply_progress, apply_status, calculate_goal_progress,
    days_between, parse_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["goals"])


def build_goal_read(goal: Goal, today: Optional[date] = None) -> GoalRead:
    today = today or date.today()
    return GoalRead.model_validate(goal).model_copy(update={
        "progress_percentage": calculate_goal_progress(goal.goal_type, goal.current_value, goal.target_value),
        "days_remaining": days_between(today, goal.target_date),
    })


@router.get("/", response_model=dict)
async def list_goals(
        goal_status: Optional[str] = Query(None, alias="status"),
        limit: int = Query(50, ge=1, le=100),
        offset: int = Query(0, ge=0),
        current_user: CurrentUser = Depends(get_current_user),
        repo: GoalRepository = Depends(get_goal_repository),
):
    status_filter = parse_status(goal_status) if goal_status else None
    goals, total = await repo.list_for_user(current_user.user_id, status_filter, limit, offset)
    today = date.today()
    return success(
        [build_goal_read(g, today) for g in goals],
        limit=limit,
        offset=offset,
        total=total,
    )


@router.get("/stats/summary", response_model=dict)
async def goal_stats(
        current_user: CurrentUser = Depends(get_current_user),
        repo: GoalRepository = Depends(get_goal_repository),
):
    summary = await repo.status_summary(current_user.user_id)
    categories = await repo.category_breakdown(current_user.user_id)
    completions = await repo.recent_completions(current_user.user_id)
    return success({
        "summary": summary,
        "by_category": categories,
        "recent_achievements": [
            {
                "goal_title": g.goal_title,
                "goal_type": g.goal_type,
                "completed_date": g.completed_date,
            }
            for g in completions
        ],
    })


@router.get("/{goal_id}", response_model=dict)
async def get_goal(
        goal_id: int,
        current_user: CurrentUser = Depends(get_current_user),
        repo: GoalRepository = Depends(get_goal_repository),
):
    """Goal with its 20 most recent progress records."""
    goal = await repo.get_owned(goal_id, current_user.user_id)
    if goal is None:
        raise NotFoundOrForbidden("Goal")

    history = await repo.recent_progress(goal.id, current_user.user_id)
    today = date.today()
    detail = GoalDetail(
        **build_goal_read(goal, today).model_dump(),
        days_elapsed=days_between(goal.start_date, today),
        progress_history=[ProgressRecordRead.model_validate(r) for r in history],
    )
    return success(detail)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=dict)
async def create_goal(
        data: GoalCreate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: GoalRepository = Depends(get_goal_repository),
        audit: AuditService = Depends(get_audit_service),
):
    active = await repo.count_with_status(current_user.user_id, GoalStatus.active)
    if active >= ACTIVE_GOAL_LIMIT:
        raise ValidationFailure(
            f"Maximum of {ACTIVE_GOAL_LIMIT} active goals allowed. "
            "Complete, pause or cancel an existing goal first."
        )

    try:
        goal = await repo.create_goal(Goal(
            user_id=current_user.user_id,
            goal_type=data.goal_type,
            goal_title=data.goal_title,
            target_value=data.target_value,
            current_value=0,
            unit=data.unit,
            start_date=data.start_date,
            target_date=data.target_date,
            status=GoalStatus.active,
            priority=data.priority,
            category=data.category,
            description=data.description,
            notes=data.notes,
        ))
        await audit.record(current_user.user_id, ActivityType.goal_update, f"Created goal: {data.goal_title}")
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Goal creation failed for user %s", current_user.user_id)
        raise Internal("Failed to create goal")

    return success(build_goal_read(goal), "Goal created successfully")


@router.api_route("/{goal_id}/progress", methods=["POST", "PUT"], response_model=dict)
async def update_goal_progress(
        goal_id: int,
        data: GoalProgressUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: GoalRepository = Depends(get_goal_repository),
        audit: AuditService = Depends(get_audit_service),
):
    """Record a new current value; an Active goal that reaches its target becomes Completed."""
    goal = await repo.get_owned(goal_id, current_user.user_id)
    if goal is None:
        raise NotFoundOrForbidden("Goal")

    try:
        was_completed = goal.status == GoalStatus.completed
        record = apply_progress(goal, data.current_value, data.notes)
        await repo.add_progress(record)

        description = f"Updated progress for goal: {goal.goal_title}"
        if goal.status == GoalStatus.completed and not was_completed:
            description = f"Completed goal: {goal.goal_title}"
            logger.info("Goal %s completed by user %s", goal.id, current_user.user_id)
        await audit.record(current_user.user_id, ActivityType.goal_update, description)
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Progress update failed for goal %s", goal_id)
        raise Internal("Failed to update goal progress")

    return success(build_goal_read(goal), "Goal progress updated successfully")


@router.put("/{goal_id}/status", response_model=dict)
async def update_goal_status(
        goal_id: int,
        data: GoalStatusUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: GoalRepository = Depends(get_goal_repository),
        audit: AuditService = Depends(get_audit_service),
):
    new_status = parse_status(data.status)

    goal = await repo.get_owned(goal_id, current_user.user_id)
    if goal is None:
        raise NotFoundOrForbidden("Goal")

    try:
        apply_status(goal, new_status)
        await audit.record(
            current_user.user_id,
            ActivityType.goal_update,
            f"Changed goal status to {new_status.value}: {goal.goal_title}",
        )
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Status update failed for goal %s", goal_id)
        raise Internal("Failed to update goal status")

    return success(build_goal_read(goal), f"Goal status updated to {new_status.value}")
