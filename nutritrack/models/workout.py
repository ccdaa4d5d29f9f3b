import enum
from sqlalchemy import Column, Integer, String, Float, Boolean, Date, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from nutritrack.core.base import Base
from nutritrack.models.user import enum_values
from datetime import datetime


class WorkoutIntensity(str, enum.Enum):
    low = "Low"
    moderate = "Moderate"
    high = "High"


class Exercise(Base):
    """Exercise catalog entry."""
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    exercise_name = Column(String(255), nullable=False, index=True)
    category = Column(String(50), nullable=True)
    equipment_needed = Column(String(255), nullable=True)
    muscle_groups = Column(String(255), nullable=True)
    difficulty_level = Column(String(30), nullable=True)
    instructions = Column(Text, nullable=True)
    calories_per_minute = Column(Float, nullable=True)
    exercise_type = Column(String(30), nullable=True)
    verified = Column(Boolean, default=False, nullable=False)


class Workout(Base):
    __tablename__ = "workouts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    workout_date = Column(Date, nullable=False, index=True)
    workout_name = Column(String(255), nullable=True)
    workout_intensity = Column(
        Enum(WorkoutIntensity, name="workout_intensity", values_callable=enum_values),
        default=WorkoutIntensity.moderate,
        nullable=False,
    )
    # Derived totals, rewritten by WorkoutAggregator after every exercise change
    total_duration = Column(Float, default=0, nullable=False)
    total_calories_burned = Column(Float, default=0, nullable=False)
    average_heart_rate = Column(Float, default=0, nullable=False)
    max_heart_rate = Column(Float, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="workouts")
    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.exercise_order",
    )


class WorkoutExercise(Base):
    __tablename__ = "workout_exercises"

    id = Column(Integer, primary_key=True)
    workout_id = Column(Integer, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id"), nullable=False)
    exercise_order = Column(Integer, nullable=False)
    sets = Column(Integer, nullable=True)
    reps = Column(Integer, nullable=True)
    weight = Column(Float, nullable=True)
    duration = Column(Float, nullable=True)  # minutes
    distance = Column(Float, nullable=True)
    rest_time = Column(Integer, nullable=True)  # seconds
    calories_burned = Column(Float, default=0, nullable=False)
    heart_rate_avg = Column(Float, nullable=True)
    perceived_exertion = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    workout = relationship("Workout", back_populates="exercises")
    exercise = relationship("Exercise")
