from .user import User
from .household import Household
from .household_membership import HouseholdMembership
from .task import Task
from .task_template import TaskTemplate
from .shrimpy_suggestion import ShrimpySuggestion


__all__ = [
    "User",
    "Household",
    "HouseholdMembership",
    "Task",
    "TaskTemplate",
    "ShrimpySuggestion",
]
