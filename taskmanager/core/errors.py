"""Domain errors raised by the task core."""


class TaskNotFoundError(LookupError):
    """Raised when an operation targets a task id absent from storage."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} not found")
