"""APScheduler-backed local notification adapter."""

import logging
from datetime import datetime
from typing import Callable

from apscheduler.jobstores.base import ConflictingIdError, JobLookupError
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from tasktracker.ports.notification_service import NotificationServiceError

logger = logging.getLogger(__name__)

Deliver = Callable[[str, str], None]


class SchedulerNotificationService:
    """
    Pending notifications as one-shot jobs on an APScheduler scheduler.

    Implements NotificationService protocol. The notification identifier is
    the job id, so the scheduler's job store is the pending set. When a job
    fires it calls `deliver(title, body)`.
    """

    def __init__(self, scheduler: BaseScheduler, deliver: Deliver, misfire_grace_time: int = 300):
        self.scheduler = scheduler
        self.deliver = deliver
        self.misfire_grace_time = misfire_grace_time

    def create(self, identifier: str, title: str, body: str, fire_at: datetime) -> None:
        """Schedule a one-shot notification."""
        if self.scheduler.get_job(identifier) is not None:
            raise NotificationServiceError(f"Notification {identifier} is already pending")
        try:
            self.scheduler.add_job(
                self.deliver,
                DateTrigger(run_date=fire_at, timezone=self.scheduler.timezone),
                args=[title, body],
                id=identifier,
                name=title,
                misfire_grace_time=self.misfire_grace_time,
            )
        except ConflictingIdError as e:
            raise NotificationServiceError(f"Notification {identifier} is already pending") from e
        except (ValueError, TypeError) as e:
            raise NotificationServiceError(f"Could not schedule {identifier}: {e}") from e
        logger.debug(f"Scheduled notification {identifier} at {fire_at:%Y-%m-%d %H:%M}")

    def cancel(self, identifiers: list[str]) -> None:
        """Remove pending notifications by identifier. Unknown ids are ignored."""
        for identifier in identifiers:
            try:
                self.scheduler.remove_job(identifier)
                logger.debug(f"Cancelled notification {identifier}")
            except JobLookupError:
                continue

    def pending(self) -> list[str]:
        """Identifiers of notifications currently pending."""
        return [job.id for job in self.scheduler.get_jobs() if isinstance(job.trigger, DateTrigger)]
