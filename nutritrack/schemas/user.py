from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import date, datetime

from nutritrack.models.user import GenderEnum

USER_FIELDS = {"first_name", "last_name", "phone"}
PROFILE_FIELDS = {
    "current_weight", "height", "target_weight", "activity_level",
    "body_fat_percentage", "fitness_level", "health_conditions",
}
PREFERENCE_FIELDS = {
    "measurement_units", "privacy_level", "theme_preference", "daily_calorie_goal",
    "daily_protein_goal", "daily_carb_goal", "daily_fat_goal",
}


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)

    current_weight: Optional[float] = Field(default=None, gt=0, le=500)
    height: Optional[float] = Field(default=None, gt=0, le=300)
    target_weight: Optional[float] = Field(default=None, gt=0, le=500)
    activity_level: Optional[str] = None
    body_fat_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    fitness_level: Optional[str] = None
    health_conditions: Optional[str] = None

    measurement_units: Optional[str] = None
    privacy_level: Optional[str] = None
    theme_preference: Optional[str] = None
    daily_calorie_goal: Optional[int] = Field(default=None, gt=0)
    daily_protein_goal: Optional[float] = Field(default=None, ge=0)
    daily_carb_goal: Optional[float] = Field(default=None, ge=0)
    daily_fat_goal: Optional[float] = Field(default=None, ge=0)

    @field_validator(
        "first_name", "last_name", "activity_level", "fitness_level",
        "measurement_units", "privacy_level", "theme_preference", "daily_calorie_goal",
    )
    @classmethod
    def reject_null(cls, v):
        # May be omitted, but the stored column cannot be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class PasswordChange(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)


class ProfileResponse(BaseModel):
    id: int
    username: str
    email: EmailStr
    first_name: str
    last_name: str
    date_of_birth: date
    gender: GenderEnum
    phone: Optional[str] = None
    registration_date: Optional[datetime] = None

    current_weight: Optional[float] = None
    height: Optional[float] = None
    target_weight: Optional[float] = None
    activity_level: Optional[str] = None
    bmr: Optional[int] = None
    body_fat_percentage: Optional[float] = None
    fitness_level: Optional[str] = None
    health_conditions: Optional[str] = None
    profile_picture: Optional[str] = None

    measurement_units: Optional[str] = None
    privacy_level: Optional[str] = None
    theme_preference: Optional[str] = None
    daily_calorie_goal: Optional[int] = None
    daily_protein_goal: Optional[float] = None
    daily_carb_goal: Optional[float] = None
    daily_fat_goal: Optional[float] = None

    bmi: Optional[float] = None
    bmi_category: Optional[str] = None
