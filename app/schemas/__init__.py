from .common import SuccessResponse, ResponseFactory
from .auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    ForgotPasswordRequest,
    SessionProfile,
)
from .household import (
    HouseholdCreate,
    HouseholdCodeCheck,
    HouseholdJoin,
    HouseholdCreated,
    HouseholdDetail,
    HouseholdMember,
    InviteLookup,
    UserHousehold,
)
from .task import (
    TaskCreate,
    TaskUpdate,
    TaskStatusUpdate,
    TaskProgressUpdate,
    TaskResponse,
    TaskDraft,
    TaskLogEntry,
    TaskSummary,
    CalendarEvent,
    Assignee,
    RepeatRule,
)
from .task_template import (
    TemplateCreate,
    TemplateUpdate,
    TemplateResponse,
    TemplateInstantiate,
)
from .assistant import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    FieldSuggestion,
    FieldSuggestionRequest,
    AffirmationResponse,
    SuggestionResponse,
)

__all__ = [
    "SuccessResponse",
    "ResponseFactory",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ForgotPasswordRequest",
    "SessionProfile",
    "HouseholdCreate",
    "HouseholdCodeCheck",
    "HouseholdJoin",
    "HouseholdCreated",
    "HouseholdDetail",
    "HouseholdMember",
    "InviteLookup",
    "UserHousehold",
    "TaskCreate",
    "TaskUpdate",
    "TaskStatusUpdate",
    "TaskProgressUpdate",
    "TaskResponse",
    "TaskDraft",
    "TaskLogEntry",
    "TaskSummary",
    "CalendarEvent",
    "Assignee",
    "RepeatRule",
    "TemplateCreate",
    "TemplateUpdate",
    "TemplateResponse",
    "TemplateInstantiate",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "FieldSuggestion",
    "FieldSuggestionRequest",
    "AffirmationResponse",
    "SuggestionResponse",
]
