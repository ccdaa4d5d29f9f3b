import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.db import get_db
from nutritrack.core.errors import Unauthenticated
from nutritrack.repositories.user_repository import UserRepository
from nutritrack.repositories.meal_repository import MealRepository
from nutritrack.repositories.workout_repository import WorkoutRepository
from nutritrack.repositories.goal_repository import GoalRepository
from nutritrack.schemas.auth import CurrentUser
from nutritrack.services.aggregates import MealAggregator, WorkoutAggregator
from nutritrack.services.audit import AuditService
from nutritrack.services.auth_service import auth_service

logger = logging.getLogger(__name__)

# Raw header so both "Bearer <token>" and a bare token are accepted
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_meal_repository(db: AsyncSession = Depends(get_db)) -> MealRepository:
    return MealRepository(db)


def get_workout_repository(db: AsyncSession = Depends(get_db)) -> WorkoutRepository:
    return WorkoutRepository(db)


def get_goal_repository(db: AsyncSession = Depends(get_db)) -> GoalRepository:
    return GoalRepository(db)


def get_audit_service(db: AsyncSession = Depends(get_db)) -> AuditService:
    return AuditService(db)


def _stored_routines(request: Request):
    return getattr(request.app.state, "stored_routines", frozenset())


def get_meal_aggregator(request: Request, db: AsyncSession = Depends(get_db)) -> MealAggregator:
    return MealAggregator(db, _stored_routines(request))


def get_workout_aggregator(request: Request, db: AsyncSession = Depends(get_db)) -> WorkoutAggregator:
    return WorkoutAggregator(db, _stored_routines(request))


def extract_token(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    header = header.strip()
    scheme, _, rest = header.partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip() or None
    return header


async def get_current_user(
        request: Request,
        authorization: Optional[str] = Depends(authorization_header),
        repo: UserRepository = Depends(get_user_repository),
) -> CurrentUser:
    """Resolve the caller's identity or reject the request.

    The account is re-read on every request, so a deactivated user is locked
    out even while holding an unexpired token.
    """
    token = extract_token(authorization)
    if token is None:
        logger.info("Rejected %s: no token", request.url.path)
        raise Unauthenticated("No token provided")

    claims = auth_service.decode_access_token(token)

    user = await repo.get_by_id(claims.user_id)
    if user is None:
        logger.info("Rejected %s: user %s not found", request.url.path, claims.user_id)
        raise Unauthenticated("User not found")
    if not user.is_active:
        logger.info("Rejected %s: user %s is %s", request.url.path, user.id, user.account_status)
        raise Unauthenticated("Account suspended or inactive")

    current = CurrentUser(user_id=user.id, username=user.username, email=user.email)
    request.state.user = current
    return current


async def get_optional_user(
        request: Request,
        authorization: Optional[str] = Depends(authorization_header),
        repo: UserRepository = Depends(get_user_repository),
) -> Optional[CurrentUser]:
    """Same checks as get_current_user, but no identity instead of a rejection."""
    try:
        return await get_current_user(request, authorization, repo)
    except Unauthenticated:
        return None
    except SQLAlchemyError:
        logger.warning("Optional authentication skipped on %s: user lookup failed", request.url.path)
        return None
