from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import date, datetime

from nutritrack.models.goal import GoalStatus, GoalPriority


class GoalCreate(BaseModel):
    goal_type: str = Field(min_length=1, max_length=50)
    goal_title: str = Field(min_length=1, max_length=255)
    target_value: float = Field(gt=0)
    unit: str = Field(default="unit", max_length=30)
    start_date: date
    target_date: date
    priority: GoalPriority = GoalPriority.medium
    category: str = Field(default="Fitness", max_length=50)
    description: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.target_date <= self.start_date:
            raise ValueError("Target date must be after start date")
        return self


class GoalProgressUpdate(BaseModel):
    current_value: float = Field(ge=0)
    notes: Optional[str] = None


class GoalStatusUpdate(BaseModel):
    # Plain string so an unknown status surfaces as a handler-level validation failure
    status: str


class ProgressRecordRead(BaseModel):
    value: float
    date_recorded: date
    notes: Optional[str] = None
    data_source: str

    class Config:
        from_attributes = True


class GoalRead(BaseModel):
    id: int
    goal_type: str
    goal_title: str
    target_value: float
    current_value: float
    unit: str
    start_date: date
    target_date: date
    status: GoalStatus
    priority: GoalPriority
    category: str
    description: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    progress_percentage: float = 0
    days_remaining: Optional[int] = None

    class Config:
        from_attributes = True


class GoalDetail(GoalRead):
    days_elapsed: Optional[int] = None
    progress_history: List[ProgressRecordRead] = []
