"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .llm_service import LLMService
from .notification_service import NotificationService, NotificationServiceError
from .preferences_store import PreferencesStore
from .extraction_strategy import ExtractionStrategy

__all__ = [
    "TaskRepository",
    "LLMService",
    "NotificationService",
    "NotificationServiceError",
    "PreferencesStore",
    "ExtractionStrategy",
]
