"""Functional core - pure business logic with no I/O."""

from .tasks import (
    CandidateTask,
    Priority,
    Task,
    confirm_candidates,
    filter_completed,
    filter_todo,
    sort_by_priority,
)
from .dates import resolve_due_date
from .extraction import (
    ExtractionError,
    ExtractionParseError,
    ExtractionUnavailable,
    extract_with_fallback,
    parse_model_response,
)
from .notifications import (
    CancelNotifications,
    NotificationPreferences,
    ScheduleNotification,
    plan_digests,
    plan_due_notification,
    plan_reschedule,
)

__all__ = [
    # Tasks
    "CandidateTask",
    "Priority",
    "Task",
    "confirm_candidates",
    "filter_completed",
    "filter_todo",
    "sort_by_priority",
    # Dates
    "resolve_due_date",
    # Extraction
    "ExtractionError",
    "ExtractionParseError",
    "ExtractionUnavailable",
    "extract_with_fallback",
    "parse_model_response",
    # Notifications
    "CancelNotifications",
    "NotificationPreferences",
    "ScheduleNotification",
    "plan_digests",
    "plan_due_notification",
    "plan_reschedule",
]
