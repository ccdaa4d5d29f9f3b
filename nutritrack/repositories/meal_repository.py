from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, distinct
from sqlalchemy.orm import selectinload

from nutritrack.models.meal import Meal, MealItem, FoodItem
from nutritrack.services.nutrition_calculator import NutritionCalculator


class MealRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: int,
        meal_date: Optional[date] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Meal], int]:
        """Newest first; also returns the unpaginated count."""
        filters = [Meal.user_id == user_id]
        if meal_date is not None:
            filters.append(Meal.meal_date == meal_date)

        total = await self.db.scalar(select(func.count(Meal.id)).where(*filters))
        result = await self.db.execute(
            select(Meal)
            .where(*filters)
            .order_by(Meal.meal_date.desc(), Meal.meal_time.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total or 0

    async def get_owned(self, meal_id: int, user_id: int, with_items: bool = False) -> Optional[Meal]:
        """None when the meal is missing or belongs to someone else."""
        query = select(Meal).where(Meal.id == meal_id, Meal.user_id == user_id)
        if with_items:
            # Items staged earlier in this session must show up on the cached instance
            query = query.options(
                selectinload(Meal.items).selectinload(MealItem.food)
            ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def search_foods(self, q: str, category: Optional[str] = None, limit: int = 20) -> List[FoodItem]:
        pattern = f"%{q}%"
        query = select(FoodItem).where(
            or_(FoodItem.food_name.ilike(pattern), FoodItem.brand.ilike(pattern))
        )
        if category:
            query = query.where(FoodItem.category == category)
        result = await self.db.execute(
            query.order_by(FoodItem.verified.desc(), FoodItem.food_name.asc()).limit(limit)
        )
        return list(result.scalars().all())

    async def get_food(self, food_id: int) -> Optional[FoodItem]:
        result = await self.db.execute(select(FoodItem).where(FoodItem.id == food_id))
        return result.scalar_one_or_none()

    async def get_foods(self, food_ids: Iterable[int]) -> Dict[int, FoodItem]:
        ids = set(food_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(FoodItem).where(FoodItem.id.in_(ids)))
        return {food.id: food for food in result.scalars().all()}

    async def create_meal(self, meal: Meal) -> Meal:
        self.db.add(meal)
        await self.db.flush()
        return meal

    async def add_item(
        self,
        meal_id: int,
        food: FoodItem,
        quantity: float,
        serving_unit: str = "serving",
    ) -> MealItem:
        item = MealItem(
            meal_id=meal_id,
            food_id=food.id,
            quantity=quantity,
            serving_unit=serving_unit,
            **NutritionCalculator.scale_nutrients(food, quantity),
        )
        self.db.add(item)
        return item

    async def daily_summary(self, user_id: int, day: date) -> dict:
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Meal.total_calories), 0),
                func.coalesce(func.sum(Meal.total_protein), 0),
                func.coalesce(func.sum(Meal.total_carbs), 0),
                func.coalesce(func.sum(Meal.total_fat), 0),
                func.count(Meal.id),
            ).where(Meal.user_id == user_id, Meal.meal_date == day)
        )
        calories, protein, carbs, fat, meals_logged = result.one()
        return {
            "calories": float(calories),
            "protein": float(protein),
            "carbs": float(carbs),
            "fat": float(fat),
            "meals_logged": int(meals_logged),
        }

    async def logging_streak(self, user_id: int, since: date) -> dict:
        """Distinct days with at least one meal on or after `since`."""
        result = await self.db.execute(
            select(func.count(distinct(Meal.meal_date)), func.max(Meal.meal_date))
            .where(Meal.user_id == user_id, Meal.meal_date >= since)
        )
        days_logged, last_logged_date = result.one()
        return {"days_logged": int(days_logged or 0), "last_logged_date": last_logged_date}
