import logging
from typing import FrozenSet

from sqlalchemy import text

from nutritrack.core.base import Base
from nutritrack.core.config import Settings
from nutritrack.core.db import Database

# Tables are registered on Base.metadata by importing the models
import nutritrack.models  # noqa: F401

logger = logging.getLogger(__name__)

MEAL_TOTALS_ROUTINE = "update_meal_totals"
WORKOUT_TOTALS_ROUTINE = "update_workout_totals"

STORED_ROUTINES = {
    MEAL_TOTALS_ROUTINE: """
CREATE OR REPLACE FUNCTION update_meal_totals(p_meal_id INTEGER) RETURNS VOID AS $$
BEGIN
    UPDATE meals SET
        total_calories = t.calories,
        total_protein = t.protein,
        total_carbs = t.carbs,
        total_fat = t.fat
    FROM (
        SELECT
            COALESCE(SUM(calories), 0) AS calories,
            COALESCE(SUM(protein), 0) AS protein,
            COALESCE(SUM(carbohydrates), 0) AS carbs,
            COALESCE(SUM(fat), 0) AS fat
        FROM meal_items
        WHERE meal_id = p_meal_id
    ) AS t
    WHERE meals.id = p_meal_id;
END;
$$ LANGUAGE plpgsql
""",
    WORKOUT_TOTALS_ROUTINE: """
CREATE OR REPLACE FUNCTION update_workout_totals(p_workout_id INTEGER) RETURNS VOID AS $$
BEGIN
    UPDATE workouts SET
        total_duration = t.duration,
        total_calories_burned = t.calories,
        average_heart_rate = t.avg_hr,
        max_heart_rate = t.max_hr
    FROM (
        SELECT
            COALESCE(SUM(duration), 0) AS duration,
            COALESCE(SUM(calories_burned), 0) AS calories,
            COALESCE(AVG(heart_rate_avg), 0) AS avg_hr,
            COALESCE(MAX(heart_rate_avg), 0) AS max_hr
        FROM workout_exercises
        WHERE workout_id = p_workout_id
    ) AS t
    WHERE workouts.id = p_workout_id;
END;
$$ LANGUAGE plpgsql
""",
}


async def init_database(database: Database, settings: Settings) -> None:
    """Create tables and, where the store supports it, the aggregate routines."""
    async with database.engine.begin() as conn:
        if settings.RESET_DATABASE:
            logger.warning("RESET_DATABASE=true, dropping all tables")
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created/verified")

        if settings.INSTALL_STORED_ROUTINES and database.dialect == "postgresql":
            for name, ddl in STORED_ROUTINES.items():
                await conn.execute(text(ddl))
                logger.info("Installed stored routine %s", name)


async def probe_stored_routines(database: Database) -> FrozenSet[str]:
    """Return the names of the aggregate routines installed in the store."""
    if database.dialect != "postgresql":
        return frozenset()

    async with database.engine.connect() as conn:
        result = await conn.execute(
            text("SELECT proname FROM pg_proc WHERE proname = ANY(:names)"),
            {"names": list(STORED_ROUTINES)},
        )
        available = frozenset(row[0] for row in result)

    missing = set(STORED_ROUTINES) - available
    if missing:
        logger.warning("Stored routines missing, totals will be computed in-process: %s", sorted(missing))
    return available
