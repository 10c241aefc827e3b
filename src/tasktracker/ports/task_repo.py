"""Task repository interface."""

from typing import Protocol

from tasktracker.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for reading and writing tasks in any backend."""

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks, completed or not."""
        ...

    def fetch_todo(self) -> list[Task]:
        """Fetch incomplete tasks."""
        ...

    def get(self, task_id: str) -> Task | None:
        """Fetch a single task. Returns None if not found."""
        ...

    def add(self, task: Task) -> None:
        ...

    def update(self, task: Task) -> None:
        """Replace the stored task with the same id."""
        ...

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns False if it did not exist."""
        ...
