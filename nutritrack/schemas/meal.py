from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, time, datetime

from nutritrack.models.meal import MealType


class MealItemCreate(BaseModel):
    food_id: int
    quantity: float = Field(gt=0)
    serving_unit: str = "serving"


class MealCreate(BaseModel):
    meal_type: MealType
    meal_date: date
    meal_time: time
    notes: Optional[str] = None
    food_items: List[MealItemCreate] = []


class FoodItemRead(BaseModel):
    id: int
    food_name: str
    brand: Optional[str] = None
    serving_size: str
    calories_per_serving: float
    protein: float
    carbohydrates: float
    fat: float
    category: Optional[str] = None
    verified: bool

    class Config:
        from_attributes = True


class MealItemRead(BaseModel):
    id: int
    food_id: int
    quantity: float
    serving_unit: str
    calories: float
    protein: float
    carbohydrates: float
    fat: float

    class Config:
        from_attributes = True


class MealRead(BaseModel):
    id: int
    meal_type: MealType
    meal_date: date
    meal_time: time
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MealDetail(MealRead):
    items: List[MealItemRead] = []


class DailySummary(BaseModel):
    summary_date: date
    daily_calories: float = 0
    daily_protein: float = 0
    daily_carbs: float = 0
    daily_fat: float = 0
    meals_logged: int = 0
