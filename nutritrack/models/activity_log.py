import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from nutritrack.core.base import Base
from datetime import datetime


class ActivityType(str, enum.Enum):
    register = "Register"
    login = "Login"
    logout = "Logout"
    profile_update = "Profile_Update"
    password_change = "Password_Change"
    meal_log = "Meal_Log"
    workout_log = "Workout_Log"
    goal_update = "Goal_Update"


class ActivityStatus(str, enum.Enum):
    success = "Success"
    failed = "Failed"


class ActivityLog(Base):
    """Write-only audit trail of mutating requests."""
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_type = Column(String(30), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(10), default=ActivityStatus.success.value, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="activity_logs")
