"""
Integration tests for /api/users/*.

Covered:
- GET /users/profile: merged document with BMI
- PUT /users/profile: partial update across tables, BMR recomputed on weight change
- PUT /users/password: success, wrong current password, too short
- GET /users/dashboard: today's totals, goal counts, streak
"""

import pytest

from nutritrack.models.activity_log import ActivityType
from nutritrack.services.auth_service import auth_service
from nutritrack.services.nutrition_calculator import NutritionCalculator

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# GET /users/profile
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_profile_merges_profile_and_preferences(user_client, mock_repo, user_fixture):
    mock_repo.get_with_profile.return_value = user_fixture

    response = await user_client.get("/api/users/profile")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == user_fixture.email
    assert data["current_weight"] == 80.0
    assert data["daily_calorie_goal"] == 2000
    assert data["bmi"] == 24.7
    assert data["bmi_category"] == "Normal"
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_get_profile_without_measurements_has_no_bmi(user_client, mock_repo, user_fixture):
    user_fixture.profile.height = None
    mock_repo.get_with_profile.return_value = user_fixture

    data = (await user_client.get("/api/users/profile")).json()["data"]

    assert data["bmi"] is None
    assert data["bmi_category"] is None


# ---------------------------------------------------------------------------
# PUT /users/profile
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_profile_changes_only_given_fields(user_client, mock_repo, mock_db, mock_audit, user_fixture):
    mock_repo.get_with_profile.return_value = user_fixture

    response = await user_client.put(
        "/api/users/profile",
        json={"first_name": "Renamed", "current_weight": 75, "daily_calorie_goal": 1800},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["first_name"] == "Renamed"
    assert data["last_name"] == "User"
    assert data["current_weight"] == 75
    assert data["height"] == 180.0
    assert data["daily_calorie_goal"] == 1800

    age = NutritionCalculator.calculate_age(user_fixture.date_of_birth)
    assert data["bmr"] == NutritionCalculator.calculate_bmr(75, 180.0, age, "Male")
    assert mock_audit.record.await_args.args[1] == ActivityType.profile_update
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_profile_without_body_measurements_keeps_bmr(user_client, mock_repo, user_fixture):
    user_fixture.profile.bmr = 1700
    mock_repo.get_with_profile.return_value = user_fixture

    response = await user_client.put("/api/users/profile", json={"theme_preference": "Dark"})

    assert response.status_code == 200
    assert response.json()["data"]["bmr"] == 1700
    assert response.json()["data"]["theme_preference"] == "Dark"


@pytest.mark.asyncio
async def test_update_profile_rejects_out_of_range_values(user_client):
    response = await user_client.put("/api/users/profile", json={"height": -5})
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["daily_calorie_goal", "first_name", "activity_level", "theme_preference"])
async def test_update_profile_rejects_null_for_required_columns(field, user_client, mock_repo, mock_db):
    response = await user_client.put("/api/users/profile", json={field: None})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == field
    mock_repo.get_with_profile.assert_not_awaited()
    mock_db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_profile_allows_clearing_optional_fields(user_client, mock_repo, user_fixture):
    user_fixture.profile.target_weight = 75.0
    mock_repo.get_with_profile.return_value = user_fixture

    response = await user_client.put("/api/users/profile", json={"target_weight": None, "phone": None})

    assert response.status_code == 200
    assert response.json()["data"]["target_weight"] is None


# ---------------------------------------------------------------------------
# PUT /users/password
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_change_password_success(user_client, mock_repo, mock_db, user_fixture):
    mock_repo.get_by_id.return_value = user_fixture

    response = await user_client.put(
        "/api/users/password",
        json={"current_password": "password123", "new_password": "brand-new-pass"},
    )

    assert response.status_code == 200
    _, new_hash = mock_repo.set_password_hash.await_args.args
    assert auth_service.verify_password("brand-new-pass", new_hash)
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_change_password_wrong_current_returns_401(user_client, mock_repo, user_fixture):
    mock_repo.get_by_id.return_value = user_fixture

    response = await user_client.put(
        "/api/users/password",
        json={"current_password": "not-it", "new_password": "brand-new-pass"},
    )

    assert response.status_code == 401
    mock_repo.set_password_hash.assert_not_awaited()


@pytest.mark.asyncio
async def test_change_password_too_short_returns_400(user_client, mock_repo):
    response = await user_client.put(
        "/api/users/password",
        json={"current_password": "password123", "new_password": "abc"},
    )

    assert response.status_code == 400
    mock_repo.get_by_id.assert_not_awaited()


# ---------------------------------------------------------------------------
# GET /users/dashboard
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_dashboard_combines_daily_figures(
        user_client, mock_meal_repo, mock_workout_repo, mock_goal_repo,
):
    mock_meal_repo.daily_summary.return_value = {
        "calories": 1450.0, "protein": 90.0, "carbs": 160.0, "fat": 40.0, "meals_logged": 3,
    }
    mock_meal_repo.logging_streak.return_value = {"days_logged": 12, "last_logged_date": None}
    mock_workout_repo.day_totals.return_value = {
        "calories_burned": 320.0, "workouts_completed": 1, "total_exercise_minutes": 45.0,
    }
    mock_goal_repo.status_summary.return_value = {
        "total_goals": 4, "active_goals": 3, "completed_goals": 1,
        "paused_goals": 0, "cancelled_goals": 0, "avg_progress": 40.0,
    }

    response = await user_client.get("/api/users/dashboard")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["today"]["calories"] == 1450.0
    assert data["today"]["meals_logged"] == 3
    assert data["today"]["workouts_completed"] == 1
    assert data["goals"] == {"active_goals": 3, "completed_goals": 1}
    assert data["streak"]["days_logged"] == 12
