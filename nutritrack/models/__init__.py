from nutritrack.models.user import User, UserProfile, UserPreferences, AccountStatus, GenderEnum
from nutritrack.models.meal import FoodItem, Meal, MealItem, MealType
from nutritrack.models.workout import Exercise, Workout, WorkoutExercise, WorkoutIntensity
from nutritrack.models.goal import Goal, ProgressTracking, GoalStatus, GoalPriority
from nutritrack.models.activity_log import ActivityLog, ActivityType, ActivityStatus

__all__ = [
    "User", "UserProfile", "UserPreferences", "AccountStatus", "GenderEnum",
    "FoodItem", "Meal", "MealItem", "MealType",
    "Exercise", "Workout", "WorkoutExercise", "WorkoutIntensity",
    "Goal", "ProgressTracking", "GoalStatus", "GoalPriority",
    "ActivityLog", "ActivityType", "ActivityStatus",
]
