from .household_service import HouseholdService
from .task_service import TaskService
from .template_service import TemplateService
from .suggestion_service import SuggestionService
from .assistant_service import AssistantService, AssistantClient

__all__ = [
    "HouseholdService",
    "TaskService",
    "TemplateService",
    "SuggestionService",
    "AssistantService",
    "AssistantClient",
]
