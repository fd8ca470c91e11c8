"""HTTP request handling for task endpoints.

Translates decoded request payloads into TaskManagementPort calls and
serializes the resulting tasks. Routing, authentication and status code
mapping live in http/server.py.
"""

import logging
import uuid
from typing import Any

from taskmanager.adapters.schemas import CreateTaskRequest, task_to_dict
from taskmanager.core.errors import TaskNotFoundError
from taskmanager.core.ports import TaskManagementPort

logger = logging.getLogger(__name__)


class InvalidTaskIdError(ValueError):
    """Raised when a path parameter is not a well-formed task id."""

    def __init__(self, raw_id: str):
        self.raw_id = raw_id
        super().__init__(f"Invalid task id: {raw_id!r}")


def parse_task_id(raw_id: str) -> str:
    """Normalize a task id taken from a URL.

    Returns:
        Canonical lowercase UUID string.

    Raises:
        InvalidTaskIdError: If raw_id is not a UUID.
    """
    try:
        return str(uuid.UUID(raw_id))
    except (ValueError, TypeError, AttributeError) as e:
        raise InvalidTaskIdError(raw_id) from e


class TaskRequestHandler:
    """Maps transport requests onto TaskManagementPort.

    Every method returns JSON-compatible data ready to be written to the
    response body.
    """

    def __init__(self, management_port: TaskManagementPort):
        """Initialize the request handler.

        Args:
            management_port: TaskManagementPort implementation for task operations.
        """
        self.management_port = management_port

    async def handle_create_request(self, payload: Any) -> dict[str, Any]:
        """Handle a request to create a task.

        Args:
            payload: Decoded JSON body.

        Returns:
            The created task.

        Raises:
            pydantic.ValidationError: If the payload fails validation.
        """
        request = CreateTaskRequest.model_validate(payload)
        task = await self.management_port.create_task(
            request.title, request.description
        )
        logger.info(
            "Task created via HTTP",
            extra={"task_id": task.id},
        )
        return task_to_dict(task)

    async def handle_list_request(self) -> list[dict[str, Any]]:
        """Handle a request to list every task."""
        tasks = await self.management_port.find_all_tasks()
        logger.debug(
            "Tasks listed via HTTP",
            extra={"count": len(tasks)},
        )
        return [task_to_dict(task) for task in tasks]

    async def handle_get_request(self, raw_id: str) -> dict[str, Any]:
        """Handle a request for a single task.

        Raises:
            InvalidTaskIdError: If raw_id is not a UUID.
            TaskNotFoundError: If the task doesn't exist.
        """
        task_id = parse_task_id(raw_id)
        task = await self.management_port.find_task_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task_to_dict(task)

    async def handle_complete_request(self, raw_id: str) -> dict[str, Any]:
        """Handle a request to complete a task.

        Raises:
            InvalidTaskIdError: If raw_id is not a UUID.
            TaskNotFoundError: If the task doesn't exist.
        """
        task_id = parse_task_id(raw_id)
        task = await self.management_port.complete_task(task_id)
        logger.info(
            "Task completed via HTTP",
            extra={"task_id": task_id},
        )
        return task_to_dict(task)
