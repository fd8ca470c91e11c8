"""Port interfaces for the task manager.

These interfaces define the boundaries between core domain logic and
external adapters. Implementations live in the adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - TaskRepositoryPort: Persist and query tasks

2. **Driving Ports** (adapters/external systems call into core)
   - TaskManagementPort: Create, find and complete tasks
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from .models import Task


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


@runtime_checkable
class TaskRepositoryPort(Protocol):
    """Capability set for durable task storage.

    Any backend (in-memory map, SQLite table, PostgreSQL table) that provides
    these four coroutines satisfies the port. Backends are chosen by the
    composition root and injected into the service; they do not need to
    inherit from this class.

    Implementations must handle:
    - Id and creation timestamp generation at persistence time
    - Consistent timestamp precision across writes and reads
    - Single-row updates keyed by id (concurrent completes are last-write-wins)
    """

    async def create(self, task: Task) -> Task:
        """Persist a new task.

        Args:
            task: Unsaved task carrying title and description. Its id,
                created_at and completed fields are ignored.

        Returns:
            The stored task with a fresh UUID id, a UTC created_at and
            completed=False.

        Raises:
            Exception: If the write cannot be performed. A write is never
                dropped silently.
        """
        ...

    async def find_by_id(self, task_id: str) -> Task | None:
        """Retrieve a task by id.

        Args:
            task_id: UUID string of the task.

        Returns:
            Task if found, None otherwise.

        Raises:
            Exception: If storage is unavailable.
        """
        ...

    async def find_all(self) -> list[Task]:
        """Retrieve every stored task.

        Returns:
            All tasks as a materialised list. Order is backend-defined.

        Raises:
            Exception: If storage is unavailable.
        """
        ...

    async def update(self, task: Task) -> None:
        """Persist the current field values of an existing task.

        Args:
            task: Task identified by its id.

        Raises:
            TaskNotFoundError: If no stored task carries the id.
            Exception: If storage is unavailable.
        """
        ...


# ============================================================================
# DRIVING PORTS (Adapters/external systems call into core)
# ============================================================================


class TaskManagementPort(ABC):
    """Port for task lifecycle operations.

    Driving port: the HTTP server and the CLI invoke these methods.
    The implementation lives in the core (task_service.py).
    """

    @abstractmethod
    async def create_task(
        self, title: str, description: str | None = None
    ) -> Task:
        """Create a task in the Active state.

        Title and description are expected to be validated by the caller.

        Returns:
            The stored task with repository-assigned id and created_at.
        """

    @abstractmethod
    async def find_task_by_id(self, task_id: str) -> Task | None:
        """Return the task with the given id, or None if absent."""

    @abstractmethod
    async def find_all_tasks(self) -> list[Task]:
        """Return every known task in repository order."""

    @abstractmethod
    async def complete_task(self, task_id: str) -> Task:
        """Mark a task as completed.

        Args:
            task_id: UUID string of the task.

        Returns:
            The updated task with completed=True.

        Raises:
            TaskNotFoundError: If the task doesn't exist.
        """
