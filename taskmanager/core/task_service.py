"""Task service: implements TaskManagementPort.

This is the core service that owns task business semantics. It delegates
persistence to a TaskRepositoryPort and enforces the single lifecycle rule:
a task that does not exist cannot be completed.
"""

import logging

from .errors import TaskNotFoundError
from .models import Task
from .ports import TaskManagementPort, TaskRepositoryPort

logger = logging.getLogger(__name__)


class TaskService(TaskManagementPort):
    """Core implementation of TaskManagementPort.

    Holds no state between calls beyond the injected repository.
    """

    def __init__(self, repository: TaskRepositoryPort):
        """Initialize the task service.

        Args:
            repository: TaskRepositoryPort implementation for persistence.
        """
        self.repository = repository

    async def create_task(
        self, title: str, description: str | None = None
    ) -> Task:
        """Create a task and return the stored record."""
        task = await self.repository.create(Task.new(title, description))

        logger.info(
            f"Task {task.id} created",
            extra={"task_id": task.id, "title": task.title},
        )
        return task

    async def find_task_by_id(self, task_id: str) -> Task | None:
        """Return the task with the given id, or None if absent."""
        return await self.repository.find_by_id(task_id)

    async def find_all_tasks(self) -> list[Task]:
        """Return every known task in repository order."""
        tasks = await self.repository.find_all()

        logger.debug("Listed tasks", extra={"count": len(tasks)})
        return tasks

    async def complete_task(self, task_id: str) -> Task:
        """Mark a task as completed.

        Completing an already completed task is allowed and persists the
        same value again.

        Raises:
            TaskNotFoundError: If the task doesn't exist.
            Exception: If the repository fails.
        """
        task = await self.repository.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        task.mark_completed()
        await self.repository.update(task)

        logger.info(
            f"Task {task_id} completed",
            extra={"task_id": task_id},
        )
        return task
