from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    computed_field,
    field_validator,
)
from typing import Annotated, Any, List, Literal, Optional, Union
from datetime import datetime
from app.models.enums import Priority, TaskStatus, Weekday
from ..utils.date_helpers import DateHelpers


class DailyRepeat(BaseModel):
    frequency: Literal["daily"] = "daily"


class WeeklyRepeat(BaseModel):
    frequency: Literal["weekly"] = "weekly"
    days: List[Weekday] = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("days", "dayOfWeek", "day_of_week"),
    )

    @field_validator("days", mode="before")
    @classmethod
    def normalize_days(cls, v):
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple, set)):
            # Set semantics, first occurrence wins
            seen = []
            for day in v:
                day = day.strip().lower() if isinstance(day, str) else day
                if day not in seen:
                    seen.append(day)
            return seen
        return v


class MonthlyRepeat(BaseModel):
    frequency: Literal["monthly"] = "monthly"
    day_of_month: int = Field(
        ...,
        ge=1,
        le=31,
        validation_alias=AliasChoices("day_of_month", "dayOfMonth"),
    )


RepeatRule = Annotated[
    Union[DailyRepeat, WeeklyRepeat, MonthlyRepeat], Field(discriminator="frequency")
]

_repeat_adapter = TypeAdapter(RepeatRule)


def parse_repeat_rule(raw: Any) -> Optional[dict]:
    """Lenient conversion of an untrusted repeat value to its stored form.

    Unknown or malformed shapes become None (no repeat).
    """
    if not raw:
        return None
    if isinstance(raw, str):
        raw = {"frequency": raw}
    if isinstance(raw, dict) and isinstance(raw.get("frequency"), str):
        raw = {**raw, "frequency": raw["frequency"].strip().lower()}
    try:
        return _repeat_adapter.validate_python(raw).model_dump(mode="json")
    except ValidationError:
        return None


def dump_repeat_rule(rule) -> Optional[dict]:
    return rule.model_dump(mode="json") if rule is not None else None


class Assignee(BaseModel):
    id: str
    name: str


class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = Field(None, max_length=50)


class TaskCreate(TaskBase):
    assigned_to: List[str] = Field(..., min_length=1, description="Assignee user ids")
    due_time: datetime
    repeat: Optional[RepeatRule] = None

    @field_validator("assigned_to")
    @classmethod
    def unique_assignees(cls, v):
        return list(dict.fromkeys(v))

    @field_validator("due_time")
    @classmethod
    def normalize_due_time(cls, v):
        return DateHelpers.to_naive_utc(v)


class TaskUpdate(TaskCreate):
    """Full replacement of the editable task fields"""


class TaskStatusUpdate(BaseModel):
    completed: bool


class TaskProgressUpdate(BaseModel):
    in_progress: bool


class TaskDraft(TaskBase):
    """Unsaved task produced from a template or the assistant"""

    assigned_to: List[Assignee]
    due_time: datetime
    status: TaskStatus = TaskStatus.PENDING
    repeat: Optional[dict] = None
    estimated_time: Optional[int] = None
    room: Optional[str] = None
    supplies: Optional[List[str]] = None
    steps: Optional[List[str]] = None


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = ""
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = None
    household_id: str
    status: TaskStatus
    assigned_to: List[Assignee]
    due_time: datetime
    repeat: Optional[dict] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    estimated_time: Optional[int] = None
    room: Optional[str] = None
    supplies: Optional[List[str]] = None
    steps: Optional[List[str]] = None

    @computed_field
    @property
    def is_overdue(self) -> bool:
        if self.status == TaskStatus.COMPLETED:
            return False
        return DateHelpers.utcnow() > self.due_time

    class Config:
        from_attributes = True


class TaskLogEntry(BaseModel):
    title: str
    completed_by: Optional[str] = None
    completed_by_name: Optional[str] = None
    completed_at: Optional[datetime] = None


class CalendarEvent(BaseModel):
    id: int
    title: str
    start: datetime
    status: TaskStatus


class TaskSummary(BaseModel):
    total: int
    completed: int
    in_progress: int
    pending: int
    completion_rate: int
