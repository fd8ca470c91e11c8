"""CLI command implementations for task management.

Provides human-initiated actions through a command-line interface.

This adapter maps CLI commands (create, list, show, complete) to
TaskManagementPort operations. It handles CLI-specific formatting and
error reporting: failures are returned as result dictionaries rather than
raised, so the interactive loop can keep running.
"""

import logging
from typing import Any

from pydantic import ValidationError

from taskmanager.adapters.http.receiver import InvalidTaskIdError, parse_task_id
from taskmanager.adapters.schemas import CreateTaskRequest, task_to_dict, validation_errors
from taskmanager.core.errors import TaskNotFoundError
from taskmanager.core.models import Task
from taskmanager.core.ports import TaskManagementPort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to TaskManagementPort."""

    def __init__(self, management: TaskManagementPort):
        """Initialize the CLI command handler.

        Args:
            management: TaskManagementPort implementation to execute commands.
        """
        self.management = management

    async def create_task(
        self, title: Any, description: Any = None
    ) -> dict[str, Any]:
        """Create a task via CLI.

        Returns:
            Dictionary with status and the created task, or the validation
            errors keyed by field.
        """
        try:
            request = CreateTaskRequest.model_validate(
                {"title": title, "description": description}
            )
        except ValidationError as e:
            return {
                "status": "error",
                "operation": "create",
                "message": "Invalid task",
                "errors": validation_errors(e),
            }

        task = await self.management.create_task(request.title, request.description)
        return {
            "status": "success",
            "operation": "create",
            "task_id": task.id,
            "data": task_to_dict(task),
        }

    async def list_tasks(self, output_format: str = "json") -> dict[str, Any]:
        """List every task via CLI.

        Args:
            output_format: Output format ('json', 'text'). Default 'json'.
        """
        tasks = await self.management.find_all_tasks()

        if output_format == "json":
            data: Any = [task_to_dict(task) for task in tasks]
        elif output_format == "text":
            data = self._format_tasks_as_text(tasks)
        else:
            return {
                "status": "error",
                "operation": "list",
                "message": f"Unsupported format: {output_format}",
            }

        return {
            "status": "success",
            "operation": "list",
            "count": len(tasks),
            "data": data,
        }

    async def show_task(self, task_id: str) -> dict[str, Any]:
        """Show a single task via CLI."""
        try:
            normalized = parse_task_id(task_id)
            task = await self.management.find_task_by_id(normalized)
            if task is None:
                raise TaskNotFoundError(normalized)
        except (InvalidTaskIdError, TaskNotFoundError) as e:
            logger.error(f"Failed to show task: {e}")
            return {
                "status": "error",
                "operation": "show",
                "task_id": task_id,
                "message": str(e),
            }

        return {
            "status": "success",
            "operation": "show",
            "task_id": task.id,
            "data": task_to_dict(task),
        }

    async def complete_task(self, task_id: str) -> dict[str, Any]:
        """Complete a task via CLI.

        Args:
            task_id: UUID of the task.
        """
        try:
            normalized = parse_task_id(task_id)
            task = await self.management.complete_task(normalized)
        except (InvalidTaskIdError, TaskNotFoundError) as e:
            logger.error(f"Failed to complete task: {e}")
            return {
                "status": "error",
                "operation": "complete",
                "task_id": task_id,
                "message": str(e),
            }

        return {
            "status": "success",
            "operation": "complete",
            "task_id": task.id,
            "message": f"Task {task.id} completed",
            "data": task_to_dict(task),
        }

    @staticmethod
    def _format_tasks_as_text(tasks: list[Task]) -> str:
        """Format tasks as a human-readable checklist."""
        if not tasks:
            return "No tasks."

        lines = []
        for task in tasks:
            mark = "x" if task.completed else " "
            created = task.created_at.isoformat() if task.created_at else "-"
            lines.append(f"[{mark}] {task.title}  ({task.id}, created {created})")
            if task.description:
                lines.append(f"    {task.description}")
        return "\n".join(lines)


async def run_command(
    management: TaskManagementPort,
    command: str,
    args: dict[str, Any],
) -> dict[str, Any]:
    """Run a CLI command.

    Maps command names to handler methods.

    Args:
        management: TaskManagementPort implementation.
        command: Command name ('create', 'list', 'show', 'complete').
        args: Dictionary of command arguments.

    Returns:
        Dictionary with command result.

    Raises:
        ValueError: If command is not recognized or a required argument
            is missing.
    """
    handler = CLICommandHandler(management)

    if command == "create":
        return await handler.create_task(args.get("title"), args.get("description"))

    elif command == "list":
        return await handler.list_tasks(args.get("format", "json"))

    elif command == "show":
        if "task_id" not in args:
            raise ValueError("Missing required parameter: task_id")
        return await handler.show_task(args["task_id"])

    elif command == "complete":
        if "task_id" not in args:
            raise ValueError("Missing required parameter: task_id")
        return await handler.complete_task(args["task_id"])

    else:
        raise ValueError(
            f"Unknown command: {command}. Use 'help' for available commands."
        )
