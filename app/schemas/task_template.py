from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.models.enums import Priority, TemplateFrequency, Weekday


def lowercase_days(v):
    if isinstance(v, list):
        return [d.lower() if isinstance(d, str) else d for d in v]
    return v


class TemplateBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)
    category: str = Field(..., min_length=1, max_length=50)
    priority: Priority = Priority.MEDIUM
    estimated_time: Optional[int] = Field(None, gt=0, description="Minutes")
    frequency: TemplateFrequency = TemplateFrequency.ONCE
    day_of_week: Optional[List[Weekday]] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    room: Optional[str] = Field(None, max_length=100)
    supplies: List[str] = []
    steps: List[str] = []

    normalize_days = field_validator("day_of_week", mode="before")(lowercase_days)


class TemplateCreate(TemplateBase):
    pass


class TemplateUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    priority: Optional[Priority] = None
    estimated_time: Optional[int] = Field(None, gt=0)
    frequency: Optional[TemplateFrequency] = None
    day_of_week: Optional[List[Weekday]] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    room: Optional[str] = Field(None, max_length=100)
    supplies: Optional[List[str]] = None
    steps: Optional[List[str]] = None

    normalize_days = field_validator("day_of_week", mode="before")(lowercase_days)


class TemplateResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = ""
    category: str
    priority: Priority
    estimated_time: Optional[int] = None
    frequency: Optional[TemplateFrequency] = None
    day_of_week: Optional[List[Weekday]] = None
    day_of_month: Optional[int] = None
    room: Optional[str] = None
    supplies: Optional[List[str]] = None
    steps: Optional[List[str]] = None
    household_id: str
    created_by: str
    is_default: bool = False
    usage_count: int = 0
    last_used: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TemplateInstantiate(BaseModel):
    assignee_ids: List[str] = Field(..., min_length=1)
    due_date: Optional[datetime] = None
