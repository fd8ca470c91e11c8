"""Domain models for the task manager.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from datetime import datetime

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


@dataclass
class Task:
    """A unit of work with a title, optional description and completion flag.

    `id` and `created_at` are assigned by the repository when the task is
    first persisted; a task built with `Task.new()` carries None for both
    until then.

    State Transitions:
        - Active (completed=False) → Completed (mark_completed)

    Completed is terminal. Marking an already completed task again is a
    no-op rather than an error.

    Note: This dataclass is intentionally mutable so that `completed` can be
    flipped in place before the repository persists it.
    """

    title: str
    description: str | None = None
    completed: bool = False
    id: str | None = None  # UUID
    created_at: datetime | None = None  # UTC

    @classmethod
    def new(cls, title: str, description: str | None = None) -> "Task":
        """Build an unsaved task in the Active state."""
        return cls(title=title, description=description, completed=False)

    @property
    def is_persisted(self) -> bool:
        """True once the repository has assigned an id and creation time."""
        return self.id is not None and self.created_at is not None

    def mark_completed(self) -> None:
        """Transition task to the Completed state."""
        self.completed = True
