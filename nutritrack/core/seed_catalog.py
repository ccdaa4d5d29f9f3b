"""
Load the starter food and exercise catalogs into an empty database.
"""
import asyncio
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.core.config import settings
from nutritrack.core.db import Database
from nutritrack.core.initial_catalog import INITIAL_FOODS, INITIAL_EXERCISES
from nutritrack.models.meal import FoodItem
from nutritrack.models.workout import Exercise

logger = logging.getLogger(__name__)


async def _seed(db: AsyncSession, model, rows) -> int:
    count = (await db.execute(select(func.count()).select_from(model))).scalar_one()
    if count > 0:
        logger.info("%s already holds %d rows, skipping seed", model.__tablename__, count)
        return 0

    db.add_all([model(**row) for row in rows])
    return len(rows)


async def seed_catalog(db: AsyncSession) -> None:
    """Seed both catalogs in one transaction."""
    foods = await _seed(db, FoodItem, INITIAL_FOODS)
    exercises = await _seed(db, Exercise, INITIAL_EXERCISES)
    await db.commit()
    if foods or exercises:
        logger.info("Seeded %d food items and %d exercises", foods, exercises)


async def main() -> None:
    database = Database.from_settings(settings)
    try:
        async with database.session() as db:
            await seed_catalog(db)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
