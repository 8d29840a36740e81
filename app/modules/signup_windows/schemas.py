from pydantic import BaseModel, model_validator
from typing import Optional, List, Literal
from datetime import date, datetime


class SignupWindowCreate(BaseModel):
    target_weekend_start: date
    target_weekend_end: date
    opens_at: Optional[datetime] = None  # defaults to now
    status: Literal["scheduled", "open"] = "scheduled"

    @model_validator(mode="after")
    def end_after_start(self):
        if self.target_weekend_end < self.target_weekend_start:
            raise ValueError("target_weekend_end must not be before target_weekend_start")
        return self


class SignupWindowResponse(BaseModel):
    id: str
    house_id: str
    target_weekend_start: date
    target_weekend_end: date
    opens_at: datetime
    status: str
    closed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SignupWindowStatus(BaseModel):
    active_window: Optional[SignupWindowResponse] = None
    next_scheduled_window: Optional[SignupWindowResponse] = None
    has_beds: bool = False


class TargetWeekend(BaseModel):
    start: date
    end: date


class ScheduleWindowsResult(BaseModel):
    success: bool
    windows_created: int = 0
    target_weekend: Optional[TargetWeekend] = None
    message: Optional[str] = None
    errors: Optional[List[str]] = None


class OpenWindowsResult(BaseModel):
    success: bool
    windows_opened: int = 0
    notifications_sent: int = 0
    message: Optional[str] = None
    errors: Optional[List[str]] = None
