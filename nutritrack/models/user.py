import enum
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from nutritrack.core.base import Base
from datetime import datetime


def enum_values(enum_cls):
    return [member.value for member in enum_cls]


class AccountStatus(str, enum.Enum):
    active = "Active"
    inactive = "Inactive"
    suspended = "Suspended"


class GenderEnum(str, enum.Enum):
    male = "Male"
    female = "Female"
    other = "Other"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(Enum(GenderEnum, name="gender", values_callable=enum_values), nullable=False)
    phone = Column(String(20), nullable=True)
    account_status = Column(
        Enum(AccountStatus, name="account_status", values_callable=enum_values),
        default=AccountStatus.active,
        nullable=False,
    )
    registration_date = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    profile = relationship("UserProfile", back_populates="user", uselist=False, cascade="all, delete")
    preferences = relationship("UserPreferences", back_populates="user", uselist=False, cascade="all, delete")
    meals = relationship("Meal", back_populates="user", cascade="all, delete")
    workouts = relationship("Workout", back_populates="user", cascade="all, delete")
    goals = relationship("Goal", back_populates="user", cascade="all, delete")
    activity_logs = relationship("ActivityLog", back_populates="user", cascade="all, delete")

    @property
    def is_active(self) -> bool:
        return self.account_status == AccountStatus.active


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    current_weight = Column(Float, nullable=True)  # kg
    height = Column(Float, nullable=True)  # cm
    target_weight = Column(Float, nullable=True)
    activity_level = Column(String(30), default="Moderately Active", nullable=False)
    bmr = Column(Integer, nullable=True)
    body_fat_percentage = Column(Float, nullable=True)
    fitness_level = Column(String(30), default="Beginner", nullable=False)
    health_conditions = Column(Text, nullable=True)
    profile_picture = Column(String(512), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="profile")


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    measurement_units = Column(String(20), default="Metric", nullable=False)
    privacy_level = Column(String(20), default="Private", nullable=False)
    theme_preference = Column(String(20), default="Auto", nullable=False)
    daily_calorie_goal = Column(Integer, default=2000, nullable=False)
    daily_protein_goal = Column(Float, nullable=True)
    daily_carb_goal = Column(Float, nullable=True)
    daily_fat_goal = Column(Float, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="preferences")
