from datetime import date
from typing import Optional


class NutritionCalculator:
    # Exercise calorie rates are quoted for a 70 kg person
    REFERENCE_WEIGHT = 70.0

    @classmethod
    def calculate_bmi(cls, weight: Optional[float], height: Optional[float]) -> Optional[float]:
        """Body mass index from kilograms and centimetres."""
        if not weight or not height or weight <= 0 or height <= 0:
            return None
        height_m = height / 100
        return round(weight / (height_m * height_m), 1)

    @classmethod
    def bmi_category(cls, bmi: Optional[float]) -> str:
        if not bmi or bmi <= 0:
            return "Invalid"
        if bmi < 18.5:
            return "Underweight"
        if bmi < 25.0:
            return "Normal"
        if bmi < 30.0:
            return "Overweight"
        return "Obese"

    @classmethod
    def calculate_age(cls, date_of_birth: Optional[date], today: Optional[date] = None) -> Optional[int]:
        if date_of_birth is None:
            return None
        today = today or date.today()
        before_birthday = (today.month, today.day) < (date_of_birth.month, date_of_birth.day)
        return today.year - date_of_birth.year - int(before_birthday)

    @classmethod
    def calculate_bmr(cls, weight: float, height: float, age: int, gender: str) -> Optional[int]:
        """Harris-Benedict; "Other" averages the male and female equations."""
        if not weight or not height or not age or not gender:
            return None
        if weight <= 0 or height <= 0 or age <= 0:
            return None

        male = 88.362 + 13.397 * weight + 4.799 * height - 5.677 * age
        female = 447.593 + 9.247 * weight + 3.098 * height - 4.330 * age

        gender = gender.lower()
        if gender == "male":
            bmr = male
        elif gender == "female":
            bmr = female
        else:
            bmr = (male + female) / 2
        return round(bmr)

    @classmethod
    def calculate_calories_burned(
        cls,
        calories_per_minute: Optional[float],
        duration_minutes: Optional[float],
        user_weight: Optional[float] = None,
    ) -> float:
        if not calories_per_minute or not duration_minutes:
            return 0.0
        if calories_per_minute <= 0 or duration_minutes <= 0:
            return 0.0

        weight = user_weight or cls.REFERENCE_WEIGHT
        calories = calories_per_minute * duration_minutes * (weight / cls.REFERENCE_WEIGHT)
        return round(calories, 1)

    @classmethod
    def scale_nutrients(cls, food, quantity: float) -> dict:
        """Nutrient contribution of `quantity` servings of a catalog food."""
        return {
            "calories": round((food.calories_per_serving or 0) * quantity, 2),
            "protein": round((food.protein or 0) * quantity, 2),
            "carbohydrates": round((food.carbohydrates or 0) * quantity, 2),
            "fat": round((food.fat or 0) * quantity, 2),
        }
