"""Request validation and wire representation for task transports.

Both the HTTP server and the CLI build a CreateTaskRequest before calling
into the core, so invalid titles and descriptions never reach TaskService.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from taskmanager.core.models import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, Task


class CreateTaskRequest(BaseModel):
    """Body of a create-task request."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default=None, validate_default=True)  # type: ignore[assignment]
    description: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title_present(cls, v: Any) -> Any:
        """Reject missing or blank titles."""
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("title")
    @classmethod
    def validate_title_length(cls, v: str) -> str:
        """Ensure title fits the storage column."""
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        return v

    @field_validator("description")
    @classmethod
    def validate_description_length(cls, v: str | None) -> str | None:
        """Ensure description fits the storage column."""
        if v is not None and len(v) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(
                f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
            )
        return v


class TaskResponse(BaseModel):
    """Wire representation of a stored task."""

    id: str
    title: str
    description: str | None
    completed: bool
    created_at: datetime = Field(serialization_alias="createdAt")

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        """Build a response from a persisted task.

        Raises:
            ValueError: If the task has not been persisted yet.
        """
        if not task.is_persisted:
            raise ValueError("Cannot serialize a task that has not been persisted")
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=task.created_at,
        )


def task_to_dict(task: Task) -> dict[str, Any]:
    """Serialize a task to a JSON-compatible dictionary."""
    return TaskResponse.from_task(task).model_dump(mode="json", by_alias=True)


def validation_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a pydantic ValidationError into {field: message}.

    Only the first message per field is kept. Errors not tied to a field
    (e.g. a body that is not an object) are reported under "body".
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        cause = error.get("ctx", {}).get("error")
        errors.setdefault(field, str(cause) if cause is not None else error["msg"])
    return errors
