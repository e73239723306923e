# app/dependencies/__init__.py

from .permissions import (
    UserSession,
    get_current_user,
    require_household_member,
    require_manager,
)

__all__ = [
    "UserSession",
    "get_current_user",
    "require_household_member",
    "require_manager",
]
