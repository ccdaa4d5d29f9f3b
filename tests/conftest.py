"""
Shared fixtures for the NutriTrack test suite.

Strategy:
- The test FastAPI app is built without the lifespan (no database connection).
- Repositories, aggregators and the audit service are replaced with AsyncMocks
  through app.dependency_overrides; get_db is replaced with mock_db.
- Tokens are issued with auth_service.create_access_token() so the real
  access gate is exercised wherever get_current_user is not overridden.
"""

import os

# Cheap hashing for tests; must be set before settings are loaded
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import date, datetime
from itertools import count
from typing import AsyncGenerator

from nutritrack.api.router import api_router
from nutritrack.core.db import get_db
from nutritrack.core.dependencies import (
    get_current_user, get_user_repository, get_meal_repository, get_workout_repository,
    get_goal_repository, get_audit_service, get_meal_aggregator, get_workout_aggregator,
)
from nutritrack.core.errors import register_exception_handlers
from nutritrack.models.user import User, UserProfile, UserPreferences, AccountStatus, GenderEnum
from nutritrack.repositories.user_repository import UserRepository
from nutritrack.repositories.meal_repository import MealRepository
from nutritrack.repositories.workout_repository import WorkoutRepository
from nutritrack.repositories.goal_repository import GoalRepository
from nutritrack.schemas.auth import CurrentUser
from nutritrack.services.aggregates import MealAggregator, WorkoutAggregator
from nutritrack.services.audit import AuditService
from nutritrack.services.auth_service import auth_service


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Test FastAPI app without the lifespan."""
    test_app = FastAPI(title="NutriTrack Test App")
    register_exception_handlers(test_app)
    test_app.include_router(api_router, prefix="/api")
    return test_app


def make_auth_headers(user: User, bare: bool = False) -> dict:
    """Authorization header carrying a valid token for `user`."""
    token = auth_service.create_access_token(user)
    return {"Authorization": token if bare else f"Bearer {token}"}


def make_user(user_id: int = 1, **overrides) -> User:
    fields = dict(
        id=user_id,
        username=f"tester{user_id}",
        email=f"tester{user_id}@example.com",
        password_hash=auth_service.hash_password("password123"),
        first_name="Test",
        last_name="User",
        date_of_birth=date(1990, 5, 17),
        gender=GenderEnum.male,
        phone=None,
        account_status=AccountStatus.active,
        registration_date=datetime(2024, 1, 1, 12, 0, 0),
    )
    fields.update(overrides)
    return User(**fields)


def make_session() -> AsyncMock:
    """AsyncSession stand-in; flush assigns ids to everything added."""
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    ids = count(100)

    added = []
    session.add.side_effect = added.append
    session.add_all.side_effect = added.extend

    async def flush():
        for obj in added:
            if getattr(obj, "id", None) is None:
                obj.id = next(ids)

    session.flush.side_effect = flush
    session.added = added

    default_result = MagicMock()
    default_result.scalar_one_or_none.return_value = None
    default_result.scalar_one.return_value = 0
    default_result.scalars.return_value.all.return_value = []
    default_result.all.return_value = []
    session.execute.return_value = default_result
    return session


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    """Active user with a profile and preferences."""
    user = make_user()
    user.profile = UserProfile(
        user_id=user.id,
        current_weight=80.0,
        height=180.0,
        activity_level="Moderately Active",
        fitness_level="Beginner",
    )
    user.preferences = UserPreferences(
        user_id=user.id,
        measurement_units="Metric",
        privacy_level="Private",
        theme_preference="Auto",
        daily_calorie_goal=2000,
    )
    return user


@pytest.fixture
def current_user(user_fixture) -> CurrentUser:
    return CurrentUser(
        user_id=user_fixture.id,
        username=user_fixture.username,
        email=user_fixture.email,
    )


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_repo() -> AsyncMock:
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def mock_meal_repo() -> AsyncMock:
    return AsyncMock(spec=MealRepository)


@pytest.fixture
def mock_workout_repo() -> AsyncMock:
    return AsyncMock(spec=WorkoutRepository)


@pytest.fixture
def mock_goal_repo() -> AsyncMock:
    return AsyncMock(spec=GoalRepository)


@pytest.fixture
def mock_audit() -> AsyncMock:
    return AsyncMock(spec=AuditService)


@pytest.fixture
def mock_meal_aggregator() -> AsyncMock:
    return AsyncMock(spec=MealAggregator)


@pytest.fixture
def mock_workout_aggregator() -> AsyncMock:
    return AsyncMock(spec=WorkoutAggregator)


@pytest.fixture
def mock_db() -> AsyncMock:
    return make_session()


def _override_common(app: FastAPI, mocks: dict) -> None:
    app.dependency_overrides[get_db] = lambda: mocks["db"]
    app.dependency_overrides[get_user_repository] = lambda: mocks["users"]
    app.dependency_overrides[get_meal_repository] = lambda: mocks["meals"]
    app.dependency_overrides[get_workout_repository] = lambda: mocks["workouts"]
    app.dependency_overrides[get_goal_repository] = lambda: mocks["goals"]
    app.dependency_overrides[get_audit_service] = lambda: mocks["audit"]
    app.dependency_overrides[get_meal_aggregator] = lambda: mocks["meal_aggregator"]
    app.dependency_overrides[get_workout_aggregator] = lambda: mocks["workout_aggregator"]


@pytest.fixture
def mocks(
        mock_db, mock_repo, mock_meal_repo, mock_workout_repo, mock_goal_repo,
        mock_audit, mock_meal_aggregator, mock_workout_aggregator,
) -> dict:
    return {
        "db": mock_db,
        "users": mock_repo,
        "meals": mock_meal_repo,
        "workouts": mock_workout_repo,
        "goals": mock_goal_repo,
        "audit": mock_audit,
        "meal_aggregator": mock_meal_aggregator,
        "workout_aggregator": mock_workout_aggregator,
    }


# ---------------------------------------------------------------------------
# HTTP clients
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(mocks) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous client; the real access gate runs against mock_repo."""
    app = create_test_app()
    _override_common(app, mocks)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(mocks, current_user) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as user_fixture; get_current_user is overridden."""
    app = create_test_app()
    _override_common(app, mocks)
    app.dependency_overrides[get_current_user] = lambda: current_user
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
