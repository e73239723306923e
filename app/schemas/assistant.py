from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime
from app.models.enums import Priority, SuggestionStatus


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    history: List[ChatMessage] = []


class ChatResponse(BaseModel):
    reply: str
    messages: List[ChatMessage]
    task_id: Optional[int] = None


class FieldSuggestionRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)


class FieldSuggestion(BaseModel):
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = None
    repeat: Optional[dict] = None
    fallback: bool = False


class AffirmationResponse(BaseModel):
    affirmation: str
    date: str
    fallback: bool = False


class SuggestionResponse(BaseModel):
    id: int
    household_id: str
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    reason: str
    assigned_to: Optional[str] = None
    repeat: Optional[dict] = None
    created_from_task_id: Optional[int] = None
    suggested_date: datetime
    status: SuggestionStatus
    accepted_task_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
