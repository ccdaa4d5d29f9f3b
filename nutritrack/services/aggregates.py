"""
Derived totals for meals and workouts.

A Meal's calories/macros and a Workout's duration/calories/heart-rate figures
are reductions over their line items. They are rewritten synchronously after
every line-item insert by ``DomainAggregator.recompute_totals``.

Two interchangeable writers perform the reduction:
- StoredRoutineWriter: one call to a routine installed in the store
  (see ``nutritrack.core.database.STORED_ROUTINES``), atomic on the store side;
- ComputedTotalsWriter: read the child rows, reduce them here, UPDATE the parent.

The routine is preferred when the startup probe found it installed; any
failure of the routine call falls back to the computed writer. The computed
path is a read-then-write pair and assumes no concurrent writers target the
same aggregate.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, FrozenSet, Optional, Sequence, Tuple

from sqlalchemy import select, update, text
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.database import MEAL_TOTALS_ROUTINE, WORKOUT_TOTALS_ROUTINE
from nutritrack.models.meal import Meal, MealItem
from nutritrack.models.workout import Workout, WorkoutExercise

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MealTotals:
    total_calories: float = 0.0
    total_protein: float = 0.0
    total_carbs: float = 0.0
    total_fat: float = 0.0


@dataclass(frozen=True)
class WorkoutTotals:
    total_duration: float = 0.0
    total_calories_burned: float = 0.0
    average_heart_rate: float = 0.0
    max_heart_rate: float = 0.0


def _num(value: Any) -> float:
    return float(value) if value is not None else 0.0


def reduce_meal_totals(items: Iterable[Sequence[Any]]) -> MealTotals:
    """Sum (calories, protein, carbohydrates, fat) rows."""
    calories = protein = carbs = fat = 0.0
    for item_calories, item_protein, item_carbs, item_fat in items:
        calories += _num(item_calories)
        protein += _num(item_protein)
        carbs += _num(item_carbs)
        fat += _num(item_fat)
    return MealTotals(calories, protein, carbs, fat)


def reduce_workout_totals(exercises: Iterable[Sequence[Any]]) -> WorkoutTotals:
    """Reduce (duration, calories_burned, heart_rate_avg) rows.

    Duration and calories are sums. Heart rate is averaged and maximised over
    the exercises that recorded one; missing values are not zeros.
    """
    duration = calories = 0.0
    heart_rates = []
    for ex_duration, ex_calories, ex_heart_rate in exercises:
        duration += _num(ex_duration)
        calories += _num(ex_calories)
        if ex_heart_rate is not None:
            heart_rates.append(float(ex_heart_rate))

    if not heart_rates:
        return WorkoutTotals(duration, calories, 0.0, 0.0)
    return WorkoutTotals(
        duration,
        calories,
        sum(heart_rates) / len(heart_rates),
        max(heart_rates),
    )


@dataclass(frozen=True)
class AggregateDefinition:
    """What to reduce for one aggregate type."""

    model: Any
    child_fk: Any
    child_columns: Tuple[Any, ...]
    reduce: Callable[[Iterable[Sequence[Any]]], Any]
    routine_name: str


MEAL_TOTALS = AggregateDefinition(
    model=Meal,
    child_fk=MealItem.meal_id,
    child_columns=(MealItem.calories, MealItem.protein, MealItem.carbohydrates, MealItem.fat),
    reduce=reduce_meal_totals,
    routine_name=MEAL_TOTALS_ROUTINE,
)

WORKOUT_TOTALS = AggregateDefinition(
    model=Workout,
    child_fk=WorkoutExercise.workout_id,
    child_columns=(WorkoutExercise.duration, WorkoutExercise.calories_burned, WorkoutExercise.heart_rate_avg),
    reduce=reduce_workout_totals,
    routine_name=WORKOUT_TOTALS_ROUTINE,
)


class TotalsWriter(ABC):
    @abstractmethod
    async def write(self, db: AsyncSession, definition: AggregateDefinition, aggregate_id: int) -> None:
        """Persist freshly reduced totals for one aggregate."""


class StoredRoutineWriter(TotalsWriter):
    async def write(self, db: AsyncSession, definition: AggregateDefinition, aggregate_id: int) -> None:
        # Savepoint so a failing call leaves the outer transaction usable
        async with db.begin_nested():
            await db.execute(
                text(f"SELECT {definition.routine_name}(:aggregate_id)"),
                {"aggregate_id": aggregate_id},
            )


class ComputedTotalsWriter(TotalsWriter):
    async def write(self, db: AsyncSession, definition: AggregateDefinition, aggregate_id: int) -> None:
        result = await db.execute(select(*definition.child_columns).where(definition.child_fk == aggregate_id))
        totals = definition.reduce(result.all())
        await db.execute(
            update(definition.model)
            .where(definition.model.id == aggregate_id)
            .values(**asdict(totals))
        )


class DomainAggregator:
    """Keeps one aggregate type's derived totals consistent with its line items."""

    def __init__(self, db: AsyncSession, definition: AggregateDefinition, stored_routines: FrozenSet[str] = frozenset()):
        self.db = db
        self.definition = definition
        self.fallback = ComputedTotalsWriter()
        self.primary: Optional[TotalsWriter] = (
            StoredRoutineWriter() if definition.routine_name in stored_routines else None
        )

    async def recompute_totals(self, aggregate_id: int):
        """Rewrite the derived totals and return the refreshed parent row."""
        # Pending line items must be visible to either writer
        await self.db.flush()

        if self.primary is None:
            await self.fallback.write(self.db, self.definition, aggregate_id)
        else:
            try:
                await self.primary.write(self.db, self.definition, aggregate_id)
            except Exception as exc:
                logger.warning(
                    "%s unavailable for %s %s, computing totals in-process: %s",
                    self.definition.routine_name, self.definition.model.__tablename__, aggregate_id, exc,
                )
                await self.fallback.write(self.db, self.definition, aggregate_id)

        return await self.refresh(aggregate_id)

    async def refresh(self, aggregate_id: int):
        # populate_existing overwrites the identity-mapped instance in place
        result = await self.db.execute(
            select(self.definition.model)
            .where(self.definition.model.id == aggregate_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


class MealAggregator(DomainAggregator):
    def __init__(self, db: AsyncSession, stored_routines: FrozenSet[str] = frozenset()):
        super().__init__(db, MEAL_TOTALS, stored_routines)


class WorkoutAggregator(DomainAggregator):
    def __init__(self, db: AsyncSession, stored_routines: FrozenSet[str] = frozenset()):
        super().__init__(db, WORKOUT_TOTALS, stored_routines)
