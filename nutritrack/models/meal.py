import enum
from sqlalchemy import Column, Integer, String, Float, Boolean, Date, Time, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from nutritrack.core.base import Base
from nutritrack.models.user import enum_values
from datetime import datetime


class MealType(str, enum.Enum):
    breakfast = "Breakfast"
    lunch = "Lunch"
    dinner = "Dinner"
    snack = "Snack"


class FoodItem(Base):
    """Food catalog entry; nutrients are per serving."""
    __tablename__ = "food_items"

    id = Column(Integer, primary_key=True, index=True)
    food_name = Column(String(255), nullable=False, index=True)
    brand = Column(String(255), nullable=True)
    serving_size = Column(String(50), nullable=False, default="1 serving")
    calories_per_serving = Column(Float, nullable=False)
    protein = Column(Float, default=0, nullable=False)
    carbohydrates = Column(Float, default=0, nullable=False)
    fat = Column(Float, default=0, nullable=False)
    category = Column(String(50), nullable=True, index=True)
    verified = Column(Boolean, default=False, nullable=False)


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    meal_type = Column(Enum(MealType, name="meal_type", values_callable=enum_values), nullable=False)
    meal_date = Column(Date, nullable=False, index=True)
    meal_time = Column(Time, nullable=False)
    # Derived totals, rewritten by MealAggregator after every item change
    total_calories = Column(Float, default=0, nullable=False)
    total_protein = Column(Float, default=0, nullable=False)
    total_carbs = Column(Float, default=0, nullable=False)
    total_fat = Column(Float, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="meals")
    items = relationship(
        "MealItem",
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="MealItem.id",
    )


class MealItem(Base):
    __tablename__ = "meal_items"

    id = Column(Integer, primary_key=True)
    meal_id = Column(Integer, ForeignKey("meals.id", ondelete="CASCADE"), nullable=False, index=True)
    food_id = Column(Integer, ForeignKey("food_items.id"), nullable=False)
    quantity = Column(Float, nullable=False)
    serving_unit = Column(String(30), default="serving", nullable=False)
    calories = Column(Float, default=0, nullable=False)
    protein = Column(Float, default=0, nullable=False)
    carbohydrates = Column(Float, default=0, nullable=False)
    fat = Column(Float, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    meal = relationship("Meal", back_populates="items")
    food = relationship("FoodItem")
