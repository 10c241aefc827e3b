"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Callable

from .dates import resolve_due_date


class Priority(IntEnum):
    """Task priority. Higher value sorts first."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def title(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, label: str | None) -> "Priority":
        """Map a free-form label to a priority. Unknown labels are Medium."""
        match (label or "").strip().lower():
            case "high":
                return cls.HIGH
            case "low":
                return cls.LOW
            case _:
                return cls.MEDIUM


@dataclass
class CandidateTask:
    """An extracted task awaiting user review."""

    title: str
    priority: Priority = Priority.MEDIUM
    due_date_phrase: str | None = None
    selected: bool = True


@dataclass
class Task:
    """A persisted task."""

    id: str
    title: str
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    completed: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "priority": int(self.priority),
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "completed": self.completed,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from its stored JSON form."""
        due = None
        if data.get("due_date"):
            due = datetime.fromisoformat(data["due_date"])
        created = datetime.fromisoformat(data["created_at"]) if data.get("created_at") else datetime.now()
        try:
            priority = Priority(int(data.get("priority", Priority.MEDIUM)))
        except ValueError:
            priority = Priority.MEDIUM
        return cls(
            id=str(data["id"]),
            title=data["title"],
            priority=priority,
            due_date=due,
            completed=bool(data.get("completed", False)),
            created_at=created,
        )


def new_task_id() -> str:
    return str(uuid.uuid4())


def confirm_candidates(
    candidates: list[CandidateTask],
    now: datetime,
    id_factory: Callable[[], str] = new_task_id,
) -> list[Task]:
    """
    Turn the selected candidates of a review into tasks.

    Due-date phrases are resolved against `now` here, before persistence.
    Pure function apart from id generation.
    """
    tasks = []
    for candidate in candidates:
        if not candidate.selected:
            continue
        title = candidate.title.strip()
        if not title:
            continue
        tasks.append(
            Task(
                id=id_factory(),
                title=title,
                priority=candidate.priority,
                due_date=resolve_due_date(candidate.due_date_phrase, now),
                created_at=now,
            )
        )
    return tasks


def filter_todo(tasks: list[Task]) -> list[Task]:
    """Filter to incomplete tasks."""
    return [t for t in tasks if not t.completed]


def filter_completed(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.completed]


def sort_by_priority(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by priority, High first.

    Ties keep their original order. Pure function - no I/O.
    """
    return sorted(tasks, key=lambda t: -t.priority)


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    """Find a task by id, or by unique id prefix."""
    for t in tasks:
        if t.id == task_id:
            return t
    matches = [t for t in tasks if t.id.startswith(task_id)]
    if len(matches) == 1:
        return matches[0]
    return None
