"""Core domain logic for the task manager.

This package contains zero external dependencies and represents
the pure business logic of the application. All adapters and
external integrations are handled by the adapters package.
"""

from .errors import TaskNotFoundError
from .models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Task

__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "Task",
    "TaskNotFoundError",
]
