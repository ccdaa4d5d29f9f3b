"""
End-to-end flow over the full HTTP stack with the real access gate.

Scenario: register -> login -> read profile -> log a meal -> read it back -> logout.
Repositories are AsyncMocks that share one in-memory user record.
"""

import pytest
from datetime import date, time

from nutritrack.models.meal import Meal, MealItem, MealType, FoodItem
from nutritrack.models.user import UserProfile, UserPreferences

pytestmark = pytest.mark.e2e


@pytest.fixture
def registry(mock_repo):
    """Wire mock_repo so that whatever is registered can log in and authenticate."""
    state = {}

    async def exists(email, username):
        user = state.get("user")
        return user is not None and (user.email == email or user.username == username)

    async def create_user(user, profile, preferences):
        user.id = 77
        profile.user_id = preferences.user_id = user.id
        profile.activity_level = "Moderately Active"
        preferences.daily_calorie_goal = 2000
        user.profile, user.preferences = profile, preferences
        state["user"] = user
        return user

    async def by_email(email):
        user = state.get("user")
        return user if user is not None and user.email == email else None

    async def by_id(user_id):
        user = state.get("user")
        return user if user is not None and user.id == user_id else None

    mock_repo.exists_with_email_or_username.side_effect = exists
    mock_repo.create_user.side_effect = create_user
    mock_repo.get_by_email.side_effect = by_email
    mock_repo.get_by_id.side_effect = by_id
    mock_repo.get_with_profile.side_effect = by_id
    return state


@pytest.mark.asyncio
async def test_register_login_and_log_meal(client, registry, mock_meal_repo, mock_meal_aggregator, mock_audit):
    register = await client.post("/api/auth/register", json={
        "username": "flow_user",
        "email": "flow@example.com",
        "password": "flow-pass-1",
        "first_name": "Flow",
        "last_name": "Tester",
        "date_of_birth": "1992-08-20",
        "gender": "Other",
    })
    assert register.status_code == 201

    again = await client.post("/api/auth/register", json={
        "username": "flow_user",
        "email": "other@example.com",
        "password": "flow-pass-1",
        "first_name": "Flow",
        "last_name": "Tester",
        "date_of_birth": "1992-08-20",
        "gender": "Other",
    })
    assert again.status_code == 409

    login = await client.post("/api/auth/login", json={"email": "flow@example.com", "password": "flow-pass-1"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['data']['token']}"}

    profile = await client.get("/api/users/profile", headers=headers)
    assert profile.status_code == 200
    assert profile.json()["data"]["username"] == "flow_user"
    assert profile.json()["data"]["activity_level"] == "Moderately Active"

    food = FoodItem(
        id=3, food_name="Banana", serving_size="1 medium", calories_per_serving=105,
        protein=1.3, carbohydrates=27, fat=0.4, category="Fruits", verified=True,
    )
    stored = Meal(
        id=50, user_id=77, meal_type=MealType.snack, meal_date=date(2024, 5, 5), meal_time=time(16, 0),
        total_calories=210, total_protein=2.6, total_carbs=54, total_fat=0.8,
    )
    stored.items = [MealItem(
        id=1, meal_id=50, food_id=3, quantity=2, serving_unit="serving",
        calories=210, protein=2.6, carbohydrates=54, fat=0.8,
    )]

    async def create_meal(meal):
        assert meal.user_id == 77
        meal.id = 50
        return meal

    mock_meal_repo.get_foods.return_value = {3: food}
    mock_meal_repo.create_meal.side_effect = create_meal
    mock_meal_repo.get_owned.return_value = stored

    created = await client.post("/api/meals/", headers=headers, json={
        "meal_type": "Snack",
        "meal_date": "2024-05-05",
        "meal_time": "16:00:00",
        "food_items": [{"food_id": 3, "quantity": 2}],
    })
    assert created.status_code == 201
    assert created.json()["data"]["total_calories"] == 210
    mock_meal_aggregator.recompute_totals.assert_awaited_once_with(50)

    fetched = await client.get("/api/meals/50", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["data"]["items"][0]["food_id"] == 3

    logout = await client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200

    audited = [call.args[1].value for call in mock_audit.record.await_args_list]
    assert audited == ["Register", "Login", "Meal_Log", "Logout"]


@pytest.mark.asyncio
async def test_token_of_unregistered_user_cannot_reach_data(client, registry):
    response = await client.get("/api/meals/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
