from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from nutritrack.models.workout import WorkoutIntensity


class WorkoutExerciseCreate(BaseModel):
    exercise_id: int
    sets: Optional[int] = Field(default=None, ge=0)
    reps: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    duration: Optional[float] = Field(default=None, ge=0, description="Minutes")
    distance: Optional[float] = Field(default=None, ge=0)
    rest_time: Optional[int] = Field(default=None, ge=0, description="Seconds")
    calories_burned: Optional[float] = Field(default=None, ge=0)
    heart_rate_avg: Optional[float] = Field(default=None, gt=0, le=250)
    perceived_exertion: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = None


class WorkoutCreate(BaseModel):
    workout_date: date
    workout_name: Optional[str] = Field(default=None, max_length=255)
    workout_intensity: WorkoutIntensity = WorkoutIntensity.moderate
    notes: Optional[str] = None
    exercises: List[WorkoutExerciseCreate] = []


class ExerciseRead(BaseModel):
    id: int
    exercise_name: str
    category: Optional[str] = None
    equipment_needed: Optional[str] = None
    muscle_groups: Optional[str] = None
    difficulty_level: Optional[str] = None
    instructions: Optional[str] = None
    calories_per_minute: Optional[float] = None
    exercise_type: Optional[str] = None
    verified: bool

    class Config:
        from_attributes = True


class WorkoutExerciseRead(BaseModel):
    id: int
    exercise_id: int
    exercise_order: int
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    duration: Optional[float] = None
    distance: Optional[float] = None
    rest_time: Optional[int] = None
    calories_burned: float
    heart_rate_avg: Optional[float] = None
    perceived_exertion: Optional[int] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class WorkoutRead(BaseModel):
    id: int
    workout_date: date
    workout_name: Optional[str] = None
    workout_intensity: WorkoutIntensity
    total_duration: float
    total_calories_burned: float
    average_heart_rate: float
    max_heart_rate: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkoutDetail(WorkoutRead):
    exercises: List[WorkoutExerciseRead] = []
