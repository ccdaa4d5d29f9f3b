import enum
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from nutritrack.core.base import Base
from nutritrack.models.user import enum_values
from datetime import datetime


class GoalStatus(str, enum.Enum):
    active = "Active"
    completed = "Completed"
    paused = "Paused"
    cancelled = "Cancelled"


class GoalPriority(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    goal_type = Column(String(50), nullable=False)  # "Weight Loss", "Strength", ...
    goal_title = Column(String(255), nullable=False)
    target_value = Column(Float, nullable=False)
    current_value = Column(Float, default=0, nullable=False)
    unit = Column(String(30), default="unit", nullable=False)
    start_date = Column(Date, nullable=False)
    target_date = Column(Date, nullable=False)
    status = Column(
        Enum(GoalStatus, name="goal_status", values_callable=enum_values),
        default=GoalStatus.active,
        nullable=False,
        index=True,
    )
    priority = Column(
        Enum(GoalPriority, name="goal_priority", values_callable=enum_values),
        default=GoalPriority.medium,
        nullable=False,
    )
    category = Column(String(50), default="Fitness", nullable=False)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    completed_date = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="goals")
    progress_history = relationship(
        "ProgressTracking",
        back_populates="goal",
        cascade="all, delete-orphan",
        order_by="ProgressTracking.date_recorded.desc()",
    )


class ProgressTracking(Base):
    """Append-only history of goal progress updates."""
    __tablename__ = "progress_tracking"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    metric_type = Column(String(30), default="Custom", nullable=False)
    value = Column(Float, nullable=False)
    date_recorded = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    data_source = Column(String(30), default="Manual", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    goal = relationship("Goal", back_populates="progress_history")
