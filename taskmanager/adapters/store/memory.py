"""In-memory task repository.

Keeps tasks in a dict keyed by id for the lifetime of the process. Useful for
local development and demos; nothing survives a restart.
"""

import asyncio
import logging
import uuid
from dataclasses import replace
from datetime import UTC, datetime

from taskmanager.core.errors import TaskNotFoundError
from taskmanager.core.models import Task

logger = logging.getLogger(__name__)


class InMemoryTaskRepository:
    """Dict-backed task repository.

    Stored tasks are copied on the way in and on the way out, so callers
    mutating a returned Task never change stored state without update().
    """

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}
        self._lock = asyncio.Lock()

    async def create(self, task: Task) -> Task:
        """Store a new task with a generated id and UTC creation time."""
        async with self._lock:
            task_id = str(uuid.uuid4())
            while task_id in self._tasks:
                task_id = str(uuid.uuid4())

            stored = Task(
                id=task_id,
                title=task.title,
                description=task.description,
                completed=False,
                created_at=datetime.now(UTC),
            )
            self._tasks[task_id] = stored
            return replace(stored)

    async def find_by_id(self, task_id: str) -> Task | None:
        """Look up a task by its ID."""
        stored = self._tasks.get(task_id)
        return replace(stored) if stored is not None else None

    async def find_all(self) -> list[Task]:
        """Return all tasks in insertion order."""
        return [replace(task) for task in self._tasks.values()]

    async def update(self, task: Task) -> None:
        """Persist title, description and completion flag of an existing task.

        id and created_at are never rewritten.
        """
        async with self._lock:
            if task.id is None or task.id not in self._tasks:
                raise TaskNotFoundError(str(task.id))
            self._tasks[task.id] = replace(
                self._tasks[task.id],
                title=task.title,
                description=task.description,
                completed=task.completed,
            )

    async def close(self) -> None:
        """Nothing to release; present for parity with pooled backends."""
        logger.debug("In-memory repository closed", extra={"count": len(self._tasks)})
