"""Adapters - I/O implementations of ports."""

from .claude_cli import ClaudeCLIService
from .ollama_api import OllamaService
from .file_task_store import FileTaskStore
from .file_preferences import FilePreferencesStore
from .apscheduler_notifications import SchedulerNotificationService

__all__ = [
    "ClaudeCLIService",
    "OllamaService",
    "FileTaskStore",
    "FilePreferencesStore",
    "SchedulerNotificationService",
]
