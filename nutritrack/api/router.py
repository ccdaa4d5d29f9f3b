from fastapi import APIRouter
from nutritrack.api.v1.auth import router as auth_router
from nutritrack.api.v1.users import router as users_router
from nutritrack.api.v1.meals import router as meals_router
from nutritrack.api.v1.workouts import router as workouts_router
from nutritrack.api.v1.goals import router as goals_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(meals_router, prefix="/meals", tags=["meals"])
api_router.include_router(workouts_router, prefix="/workouts", tags=["workouts"])
api_router.include_router(goals_router, prefix="/goals", tags=["goals"])
