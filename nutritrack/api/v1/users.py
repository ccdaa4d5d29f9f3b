import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.config import settings
from nutritrack.core.db import get_db
from nutritrack.core.dependencies import (
    get_current_user, get_user_repository, get_meal_repository,
    get_workout_repository, get_goal_repository, get_audit_service,
)
from nutritrack.core.errors import AppError, Internal, NotFoundOrForbidden, Unauthenticated, ValidationFailure
from nutritrack.core.responses import success
from nutritrack.models.activity_log import ActivityType
from nutritrack.models.user import User, UserProfile, UserPreferences
from nutritrack.repositories.user_repository import UserRepository
from nutritrack.repositories.meal_repository import MealRepository
from nutritrack.repositories.workout_repository import WorkoutRepository
from nutritrack.repositories.goal_repository import GoalRepository
from nutritrack.schemas.auth import CurrentUser
from nutritrack.schemas.user import (
    ProfileUpdate, PasswordChange, ProfileResponse,
    USER_FIELDS, PROFILE_FIELDS, PREFERENCE_FIELDS,
)
from nutritrack.services.audit import AuditService
from nutritrack.services.auth_service import auth_service
from nutritrack.services.nutrition_calculator import NutritionCalculator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

STREAK_WINDOW_DAYS = 30

ACCOUNT_FIELDS = (
    "id", "username", "email", "first_name", "last_name",
    "date_of_birth", "gender", "phone", "registration_date",
)


def build_profile_response(user: User) -> ProfileResponse:
    """Flatten user, profile and preferences into one document."""
    data = {field: getattr(user, field) for field in ACCOUNT_FIELDS}
    if user.profile is not None:
        data.update({f: getattr(user.profile, f) for f in PROFILE_FIELDS | {"bmr", "profile_picture"}})
    if user.preferences is not None:
        data.update({f: getattr(user.preferences, f) for f in PREFERENCE_FIELDS})

    bmi = NutritionCalculator.calculate_bmi(data.get("current_weight"), data.get("height"))
    if bmi is not None:
        data["bmi"] = bmi
        data["bmi_category"] = NutritionCalculator.bmi_category(bmi)
    return ProfileResponse(**data)


def _recompute_bmr(user: User, profile: UserProfile) -> None:
    gender = getattr(user.gender, "value", user.gender)
    profile.bmr = NutritionCalculator.calculate_bmr(
        weight=profile.current_weight,
        height=profile.height,
        age=NutritionCalculator.calculate_age(user.date_of_birth),
        gender=gender,
    )


@router.get("/profile", response_model=dict)
async def get_profile(
        current_user: CurrentUser = Depends(get_current_user),
        repo: UserRepository = Depends(get_user_repository),
):
    user = await repo.get_with_profile(current_user.user_id)
    if user is None:
        raise NotFoundOrForbidden("User")
    return success(build_profile_response(user))


@router.put("/profile", response_model=dict)
async def update_profile(
        data: ProfileUpdate,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: UserRepository = Depends(get_user_repository),
        audit: AuditService = Depends(get_audit_service),
):
    """Partial update; fields left out of the request keep their values."""
    changes = data.model_dump(exclude_unset=True)

    try:
        user = await repo.get_with_profile(current_user.user_id)
        if user is None:
            raise NotFoundOrForbidden("User")

        if user.profile is None:
            user.profile = UserProfile(user_id=user.id)
        if user.preferences is None:
            user.preferences = UserPreferences(user_id=user.id)

        for field, value in changes.items():
            if field in USER_FIELDS:
                setattr(user, field, value)
            elif field in PROFILE_FIELDS:
                setattr(user.profile, field, value)
            elif field in PREFERENCE_FIELDS:
                setattr(user.preferences, field, value)

        if {"current_weight", "height"} & changes.keys():
            _recompute_bmr(user, user.profile)

        await audit.record(user.id, ActivityType.profile_update, "Profile updated")
        await db.commit()
    except AppError:
        raise
    except Exception:
        await db.rollback()
        logger.exception("Profile update failed for user %s", current_user.user_id)
        raise Internal("Failed to update profile")

    return success(build_profile_response(user), "Profile updated successfully")


@router.put("/password", response_model=dict)
async def change_password(
        data: PasswordChange,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
        repo: UserRepository = Depends(get_user_repository),
        audit: AuditService = Depends(get_audit_service),
):
    if len(data.new_password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationFailure(
            f"New password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
        )

    user = await repo.get_by_id(current_user.user_id)
    if user is None:
        raise NotFoundOrForbidden("User")

    if not auth_service.verify_password(data.current_password, user.password_hash):
        raise Unauthenticated("Current password is incorrect", error="Invalid password")

    try:
        await repo.set_password_hash(user, auth_service.hash_password(data.new_password))
        await audit.record(user.id, ActivityType.password_change, "Password changed")
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Password change failed for user %s", user.id)
        raise Internal("Failed to change password")

    return success(message="Password changed successfully")


@router.get("/dashboard", response_model=dict)
async def get_dashboard(
        current_user: CurrentUser = Depends(get_current_user),
        meals: MealRepository = Depends(get_meal_repository),
        workouts: WorkoutRepository = Depends(get_workout_repository),
        goals: GoalRepository = Depends(get_goal_repository),
):
    today = date.today()
    user_id = current_user.user_id

    nutrition = await meals.daily_summary(user_id, today)
    training = await workouts.day_totals(user_id, today)
    goal_summary = await goals.status_summary(user_id)
    streak = await meals.logging_streak(user_id, today - timedelta(days=STREAK_WINDOW_DAYS))

    return success({
        "today": {
            "date": today,
            "calories": nutrition["calories"],
            "protein": nutrition["protein"],
            "carbs": nutrition["carbs"],
            "fat": nutrition["fat"],
            "meals_logged": nutrition["meals_logged"],
            **training,
        },
        "goals": {
            "active_goals": goal_summary["active_goals"],
            "completed_goals": goal_summary["completed_goals"],
        },
        "streak": streak,
    })
