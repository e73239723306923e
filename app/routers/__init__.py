# app/routers/__init__.py

# Import all router modules to make them available
from . import auth
from . import households
from . import tasks
from . import templates
from . import assistant
from . import suggestions

__all__ = [
    "auth",
    "households",
    "tasks",
    "templates",
    "assistant",
    "suggestions",
]
