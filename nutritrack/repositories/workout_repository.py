from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, distinct
from sqlalchemy.orm import selectinload

from nutritrack.models.workout import Workout, WorkoutExercise, Exercise


class WorkoutRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: int,
        workout_date: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Tuple[Workout, int]], int]:
        """(workout, exercise_count) pairs, newest first, plus the unpaginated count."""
        filters = [Workout.user_id == user_id]
        if workout_date is not None:
            filters.append(Workout.workout_date == workout_date)

        total = await self.db.scalar(select(func.count(Workout.id)).where(*filters))
        result = await self.db.execute(
            select(Workout, func.count(WorkoutExercise.id))
            .outerjoin(WorkoutExercise, WorkoutExercise.workout_id == Workout.id)
            .where(*filters)
            .group_by(Workout.id)
            .order_by(Workout.workout_date.desc(), Workout.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return [(workout, count) for workout, count in result.all()], total or 0

    async def get_owned(self, workout_id: int, user_id: int, with_exercises: bool = False) -> Optional[Workout]:
        query = select(Workout).where(Workout.id == workout_id, Workout.user_id == user_id)
        if with_exercises:
            query = query.options(
                selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise)
            ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def search_exercises(
        self,
        q: str,
        category: Optional[str] = None,
        difficulty: Optional[str] = None,
        limit: int = 20,
    ) -> List[Exercise]:
        pattern = f"%{q}%"
        query = select(Exercise).where(
            or_(
                Exercise.exercise_name.ilike(pattern),
                Exercise.instructions.ilike(pattern),
                Exercise.muscle_groups.ilike(pattern),
            )
        )
        if category:
            query = query.where(Exercise.category == category)
        if difficulty:
            query = query.where(Exercise.difficulty_level == difficulty)
        result = await self.db.execute(
            query.order_by(Exercise.verified.desc(), Exercise.exercise_name.asc()).limit(limit)
        )
        return list(result.scalars().all())

    async def get_exercise(self, exercise_id: int) -> Optional[Exercise]:
        result = await self.db.execute(select(Exercise).where(Exercise.id == exercise_id))
        return result.scalar_one_or_none()

    async def get_exercises(self, exercise_ids: Iterable[int]) -> Dict[int, Exercise]:
        ids = set(exercise_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(Exercise).where(Exercise.id.in_(ids)))
        return {exercise.id: exercise for exercise in result.scalars().all()}

    async def next_exercise_order(self, workout_id: int) -> int:
        current = await self.db.scalar(
            select(func.max(WorkoutExercise.exercise_order)).where(WorkoutExercise.workout_id == workout_id)
        )
        return (current or 0) + 1

    async def create_workout(self, workout: Workout) -> Workout:
        self.db.add(workout)
        await self.db.flush()
        return workout

    async def add_exercise(self, entry: WorkoutExercise) -> WorkoutExercise:
        self.db.add(entry)
        return entry

    async def day_totals(self, user_id: int, day: date) -> dict:
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Workout.total_calories_burned), 0),
                func.count(Workout.id),
                func.coalesce(func.sum(Workout.total_duration), 0),
            ).where(Workout.user_id == user_id, Workout.workout_date == day)
        )
        calories_burned, workouts_completed, minutes = result.one()
        return {
            "calories_burned": float(calories_burned),
            "workouts_completed": int(workouts_completed),
            "total_exercise_minutes": float(minutes),
        }

    async def period_stats(self, user_id: int, since: date) -> dict:
        result = await self.db.execute(
            select(
                func.count(Workout.id),
                func.coalesce(func.sum(Workout.total_duration), 0),
                func.coalesce(func.sum(Workout.total_calories_burned), 0),
                func.coalesce(func.avg(Workout.total_duration), 0),
                func.count(distinct(Workout.workout_date)),
            ).where(Workout.user_id == user_id, Workout.workout_date >= since)
        )
        total, minutes, calories, avg_duration, active_days = result.one()
        return {
            "total_workouts": int(total),
            "total_minutes": float(minutes),
            "total_calories_burned": float(calories),
            "avg_workout_duration": round(float(avg_duration), 1),
            "active_days": int(active_days),
        }

    async def favorite_exercises(self, user_id: int, since: date, limit: int = 5) -> List[dict]:
        usage = func.count(WorkoutExercise.id).label("usage_count")
        result = await self.db.execute(
            select(
                Exercise.exercise_name,
                usage,
                func.coalesce(func.avg(WorkoutExercise.calories_burned), 0),
            )
            .select_from(WorkoutExercise)
            .join(Exercise, WorkoutExercise.exercise_id == Exercise.id)
            .join(Workout, WorkoutExercise.workout_id == Workout.id)
            .where(Workout.user_id == user_id, Workout.workout_date >= since)
            .group_by(Exercise.id, Exercise.exercise_name)
            .order_by(usage.desc())
            .limit(limit)
        )
        return [
            {"exercise_name": name, "usage_count": int(count), "avg_calories": round(float(avg), 1)}
            for name, count, avg in result.all()
        ]
