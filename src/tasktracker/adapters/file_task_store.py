"""File-based task storage adapter."""

import json
import logging
from pathlib import Path

from tasktracker.core.tasks import Task, filter_todo

logger = logging.getLogger(__name__)


class FileTaskStore:
    """
    File-based task storage.

    Implements TaskRepository protocol. All tasks live in a single JSON
    list, rewritten on every change.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> list[Task]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
            return [Task.from_dict(item) for item in data]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise RuntimeError(f"Task file {self.path} is corrupt: {e}") from e

    def _write(self, tasks: list[Task]) -> None:
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps([t.to_dict() for t in tasks], indent=2))
        tmp.replace(self.path)

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks, completed or not."""
        return self._read()

    def fetch_todo(self) -> list[Task]:
        """Fetch incomplete tasks."""
        return filter_todo(self._read())

    def get(self, task_id: str) -> Task | None:
        """Fetch a single task. Returns None if not found."""
        for task in self._read():
            if task.id == task_id:
                return task
        return None

    def add(self, task: Task) -> None:
        tasks = self._read()
        if any(t.id == task.id for t in tasks):
            raise ValueError(f"Task {task.id} already exists")
        tasks.append(task)
        self._write(tasks)
        logger.debug(f"Added task {task.id}: {task.title}")

    def update(self, task: Task) -> None:
        """Replace the stored task with the same id."""
        tasks = self._read()
        for i, existing in enumerate(tasks):
            if existing.id == task.id:
                tasks[i] = task
                self._write(tasks)
                return
        raise KeyError(task.id)

    def delete(self, task_id: str) -> bool:
        """Delete a task. Returns False if it did not exist."""
        tasks = self._read()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._write(remaining)
        return True
