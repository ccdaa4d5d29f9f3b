"""
Unit tests for the repositories' query shape.

Covered:
- owned lookups filter by both resource id and owner id
- list queries are scoped to the owner and paginate
- UserRepository.create_user stages profile and preferences for the new id
- MealRepository.add_item scales catalog nutrients
"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from nutritrack.models.goal import GoalStatus
from nutritrack.models.meal import FoodItem, MealItem
from nutritrack.models.user import UserProfile, UserPreferences
from nutritrack.repositories.goal_repository import GoalRepository
from nutritrack.repositories.meal_repository import MealRepository
from nutritrack.repositories.user_repository import UserRepository
from nutritrack.repositories.workout_repository import WorkoutRepository

from tests.conftest import make_session, make_user

pytestmark = pytest.mark.unit


def compiled(statement):
    compiled_statement = statement.compile()
    return str(compiled_statement), compiled_statement.params


def last_statement(session):
    return session.execute.await_args.args[0]


# ---------------------------------------------------------------------------
# Ownership filters
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_meal_get_owned_filters_by_owner():
    session = make_session()
    await MealRepository(session).get_owned(12, 3)

    sql, params = compiled(last_statement(session))
    assert "meals.id = " in sql
    assert "meals.user_id = " in sql
    assert set(params.values()) >= {12, 3}


@pytest.mark.asyncio
async def test_workout_get_owned_filters_by_owner():
    session = make_session()
    await WorkoutRepository(session).get_owned(8, 4, with_exercises=True)

    sql, params = compiled(last_statement(session))
    assert "workouts.user_id = " in sql
    assert set(params.values()) >= {8, 4}


@pytest.mark.asyncio
async def test_goal_get_owned_filters_by_owner():
    session = make_session()
    await GoalRepository(session).get_owned(2, 9)

    sql, params = compiled(last_statement(session))
    assert "goals.user_id = " in sql
    assert set(params.values()) >= {2, 9}


@pytest.mark.asyncio
async def test_goal_progress_history_is_scoped_and_limited():
    session = make_session()
    await GoalRepository(session).recent_progress(2, 9)

    sql, params = compiled(last_statement(session))
    assert "progress_tracking.user_id = " in sql
    assert "ORDER BY progress_tracking.date_recorded DESC" in sql
    assert 20 in params.values()


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_meal_list_scoped_to_owner_and_paginated():
    session = make_session()
    session.scalar = AsyncMock(return_value=3)

    meals, total = await MealRepository(session).list_for_user(5, date(2024, 3, 1), limit=10, offset=20)

    assert meals == []
    assert total == 3
    sql, params = compiled(last_statement(session))
    assert "meals.user_id = " in sql
    assert "meals.meal_date = " in sql
    assert "ORDER BY meals.meal_date DESC, meals.meal_time DESC" in sql
    assert params.get("param_1") == 10
    assert params.get("param_2") == 20


@pytest.mark.asyncio
async def test_goal_count_with_status_filters_owner_and_status():
    session = make_session()
    session.scalar = AsyncMock(return_value=10)

    assert await GoalRepository(session).count_with_status(1, GoalStatus.active) == 10

    sql, _ = compiled(session.scalar.await_args.args[0])
    assert "goals.user_id = " in sql
    assert "goals.status = " in sql


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_user_links_profile_and_preferences():
    session = make_session()
    user = make_user(user_id=None)
    profile, preferences = UserProfile(), UserPreferences()

    created = await UserRepository(session).create_user(user, profile, preferences)

    assert created.id is not None
    assert profile.user_id == created.id
    assert preferences.user_id == created.id
    session.add.assert_called_once_with(user)
    session.add_all.assert_called_once_with([profile, preferences])
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_item_copies_scaled_nutrients():
    session = make_session()
    food = FoodItem(id=4, food_name="Oats", calories_per_serving=150, protein=5, carbohydrates=27, fat=3)

    item = await MealRepository(session).add_item(11, food, 2, "cup")

    assert isinstance(item, MealItem)
    assert item.meal_id == 11
    assert item.food_id == 4
    assert (item.calories, item.protein, item.carbohydrates, item.fat) == (300, 10, 54, 6)
    session.add.assert_called_once_with(item)


@pytest.mark.asyncio
async def test_get_foods_skips_query_for_empty_ids():
    session = make_session()
    assert await MealRepository(session).get_foods([]) == {}
    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_next_exercise_order_starts_at_one():
    session = make_session()
    session.scalar = AsyncMock(return_value=None)
    assert await WorkoutRepository(session).next_exercise_order(1) == 1

    session.scalar = AsyncMock(return_value=4)
    assert await WorkoutRepository(session).next_exercise_order(1) == 5


@pytest.mark.asyncio
async def test_daily_summary_defaults_to_zero():
    session = make_session()
    result = MagicMock()
    result.one.return_value = (0, 0, 0, 0, 0)
    session.execute.return_value = result

    summary = await MealRepository(session).daily_summary(1, date(2024, 1, 1))

    assert summary == {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0, "meals_logged": 0}
