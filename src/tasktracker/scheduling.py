"""Notification scheduler - applies planned operations to a notification service."""

import logging
from datetime import datetime

from .core.notifications import (
    CancelNotifications,
    NotificationOp,
    NotificationPreferences,
    ScheduleNotification,
    plan_digests,
    plan_due_notification,
    plan_reschedule,
)
from .core.tasks import Task
from .ports.notification_service import NotificationService, NotificationServiceError

logger = logging.getLogger(__name__)


class NotificationScheduler:
    """
    Keeps a notification service in line with the task list.

    Notifications are best-effort: a rejected create or cancel is logged and
    skipped, never retried and never raised to the caller.
    """

    def __init__(self, service: NotificationService):
        self.service = service

    def apply(self, ops: list[NotificationOp]) -> None:
        """Issue operations in order."""
        for op in ops:
            try:
                match op:
                    case CancelNotifications(identifiers=identifiers):
                        self.service.cancel(list(identifiers))
                    case ScheduleNotification():
                        self.service.create(op.identifier, op.title, op.body, op.fire_at)
            except NotificationServiceError as e:
                logger.error(f"Notification service rejected {type(op).__name__}: {e}")

    def reschedule(
        self,
        tasks: list[Task],
        prefs: NotificationPreferences,
        now: datetime | None = None,
    ) -> list[NotificationOp]:
        """Recompute every due alert and digest for the task list."""
        now = now or datetime.now()
        ops = plan_reschedule(tasks, prefs, now)
        self.apply(ops)
        created = sum(1 for op in ops if isinstance(op, ScheduleNotification))
        logger.info(f"Rescheduled notifications for {len(tasks)} tasks ({created} pending)")
        return ops

    def schedule_task(
        self,
        task: Task,
        prefs: NotificationPreferences,
        now: datetime | None = None,
    ) -> list[NotificationOp]:
        """Recompute the due alert of a single task."""
        ops = plan_due_notification(task, prefs, now or datetime.now())
        self.apply(ops)
        return ops

    def cancel_task(self, task_id: str) -> list[NotificationOp]:
        """Drop the due alert of a deleted task."""
        ops: list[NotificationOp] = [CancelNotifications((str(task_id),))]
        self.apply(ops)
        return ops

    def refresh_digests(
        self,
        tasks: list[Task],
        prefs: NotificationPreferences,
        now: datetime | None = None,
    ) -> list[NotificationOp]:
        """Recompute daily and weekly digests only."""
        ops = plan_digests(tasks, prefs, now or datetime.now())
        self.apply(ops)
        return ops
