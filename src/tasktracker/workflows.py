"""Shared workflow layer between the CLI and the notification daemon.

Transcript -> candidates -> review -> persisted tasks, plus the small task
list mutations and the preference switches.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from .adapters.claude_cli import ClaudeCLIService
from .adapters.file_preferences import FilePreferencesStore
from .adapters.file_task_store import FileTaskStore
from .adapters.ollama_api import OllamaService
from .config import TASKTRACKER_HOME, Config
from .core.dates import resolve_due_date
from .core.notifications import NotificationOp, NotificationPreferences, plan_reschedule
from .core.tasks import CandidateTask, Priority, Task, confirm_candidates, find_task, new_task_id
from .extraction import ModelExtractionStrategy, extract_tasks_sync
from .ports.llm_service import LLMService
from .ports.preferences_store import PreferencesStore
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)

PREFERENCE_FLAGS = {
    "notifications": "notifications_enabled",
    "due": "notify_on_due_date",
    "daily": "daily_digest_enabled",
    "weekly": "weekly_digest_enabled",
}


def local_now(config: Config) -> datetime:
    """Wall-clock time in the configured timezone, as a naive datetime."""
    if config.timezone:
        return datetime.now(ZoneInfo(config.timezone)).replace(tzinfo=None)
    return datetime.now()


def get_task_store(config: Config) -> FileTaskStore:
    return FileTaskStore(config.tasks_path)


def get_preferences_store(config: Config) -> FilePreferencesStore:
    return FilePreferencesStore(config.preferences_path)


def get_llm_service(config: Config) -> LLMService | None:
    """Resolve the configured generative text service, or None if disabled."""
    match config.llm_backend:
        case "claude":
            return ClaudeCLIService(cwd=TASKTRACKER_HOME if TASKTRACKER_HOME.exists() else None,
                                    timeout=config.llm_timeout)
        case "ollama":
            return OllamaService(
                base_url=config.ollama_base_url,
                model=config.ollama_model,
                timeout=config.llm_timeout,
            )
        case _:
            return None


def extract_candidates(config: Config, transcript: str, use_model: bool = True) -> list[CandidateTask]:
    """Run extraction with the configured model, falling back to heuristics."""
    primary = None
    if use_model:
        llm = get_llm_service(config)
        if llm is not None:
            primary = ModelExtractionStrategy(llm)
    candidates = extract_tasks_sync(transcript, primary=primary, timeout=config.llm_timeout)
    logger.info(f"Extracted {len(candidates)} candidate tasks")
    return candidates


def save_candidates(
    store: TaskRepository,
    candidates: list[CandidateTask],
    now: datetime,
) -> list[Task]:
    """Persist the selected candidates of a review, resolving due dates first."""
    tasks = confirm_candidates(candidates, now)
    for task in tasks:
        store.add(task)
    return tasks


def parse_due_input(value: str | None, now: datetime) -> datetime | None:
    """Accept either a due-date phrase or an ISO date/datetime."""
    if not value:
        return None
    resolved = resolve_due_date(value, now)
    if resolved is not None:
        return resolved
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def add_task(
    store: TaskRepository,
    title: str,
    priority: Priority = Priority.MEDIUM,
    due_date: datetime | None = None,
    now: datetime | None = None,
) -> Task:
    """Create a task by hand."""
    title = title.strip()
    if not title:
        raise ValueError("Task title must not be empty")
    task = Task(
        id=new_task_id(),
        title=title,
        priority=priority,
        due_date=due_date,
        created_at=now or datetime.now(),
    )
    store.add(task)
    return task


def set_completed(store: TaskRepository, task_id: str, completed: bool = True) -> Task:
    """Mark a task done (or not done). Accepts a unique id prefix."""
    task = find_task(store.fetch_all(), task_id)
    if task is None:
        raise KeyError(task_id)
    task.completed = completed
    store.update(task)
    return task


def delete_task(store: TaskRepository, task_id: str) -> Task:
    """Delete a task. Accepts a unique id prefix."""
    task = find_task(store.fetch_all(), task_id)
    if task is None:
        raise KeyError(task_id)
    store.delete(task.id)
    return task


def update_preferences(prefs_store: PreferencesStore, **flags: bool | None) -> NotificationPreferences:
    """
    Change notification switches by short name (notifications, due, daily, weekly).

    Flags passed as None are left alone.
    """
    prefs = prefs_store.load()
    for name, value in flags.items():
        if value is None:
            continue
        if name not in PREFERENCE_FLAGS:
            raise ValueError(f"Unknown preference: {name}")
        setattr(prefs, PREFERENCE_FLAGS[name], value)
    prefs_store.save(prefs)
    return prefs


def plan_notifications(
    store: TaskRepository,
    prefs_store: PreferencesStore,
    now: datetime,
) -> list[NotificationOp]:
    """The operations a reschedule would issue right now, without issuing them."""
    return plan_reschedule(store.fetch_all(), prefs_store.load(), now)
