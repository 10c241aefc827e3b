"""Notification daemon.

Owns an APScheduler scheduler whose one-shot jobs are the pending
notifications. A periodic `refresh` job reloads the task list and
preferences and reschedules whenever either has changed, or the day has
rolled over.
"""

import logging
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .adapters.apscheduler_notifications import Deliver, SchedulerNotificationService
from .config import Config, load_config
from .ports.preferences_store import PreferencesStore
from .ports.task_repo import TaskRepository
from .scheduling import NotificationScheduler
from .workflows import get_preferences_store, get_task_store, local_now

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "refresh"


def log_notification(title: str, body: str) -> None:
    logger.info(f"Notification: {title} - {body}")


class NotificationDaemon:
    """Watches the task store and preferences, keeps notifications current."""

    def __init__(
        self,
        store: TaskRepository,
        prefs_store: PreferencesStore,
        scheduler: BaseScheduler,
        deliver: Deliver = log_notification,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.prefs_store = prefs_store
        self.scheduler = scheduler
        self.clock = clock
        self.notifications = NotificationScheduler(SchedulerNotificationService(scheduler, deliver))
        self._fingerprint: tuple | None = None
        self._known_ids: set[str] = set()

    def refresh(self) -> bool:
        """Reschedule if anything changed. Returns True if it rescheduled."""
        now = self.clock()
        try:
            tasks = self.store.fetch_all()
        except RuntimeError as e:
            logger.error(f"Failed to load tasks: {e}")
            return False
        prefs = self.prefs_store.load()

        fingerprint = (
            now.date(),
            tuple(tuple(t.to_dict().items()) for t in tasks),
            tuple(prefs.to_dict().items()),
        )
        if fingerprint == self._fingerprint:
            return False

        current_ids = {t.id for t in tasks}
        for task_id in sorted(self._known_ids - current_ids):
            self.notifications.cancel_task(task_id)

        self.notifications.reschedule(tasks, prefs, now)
        self._known_ids = current_ids
        self._fingerprint = fingerprint
        return True


def setup_scheduler(daemon: NotificationDaemon, config: Config) -> None:
    """Add the periodic refresh job, running once immediately."""
    daemon.scheduler.add_job(
        daemon.refresh,
        IntervalTrigger(seconds=config.refresh_interval),
        id=REFRESH_JOB_ID,
        next_run_time=datetime.now(daemon.scheduler.timezone),
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Refreshing notifications every {config.refresh_interval}s")


def create_daemon(config: Config | None = None, deliver: Deliver = log_notification) -> NotificationDaemon:
    """Build a daemon on a blocking scheduler from configuration."""
    if config is None:
        config = load_config()

    scheduler = BlockingScheduler(timezone=config.timezone) if config.timezone else BlockingScheduler()
    daemon = NotificationDaemon(
        store=get_task_store(config),
        prefs_store=get_preferences_store(config),
        scheduler=scheduler,
        deliver=deliver,
        clock=lambda: local_now(config),
    )
    setup_scheduler(daemon, config)
    return daemon


def run_daemon(config: Config | None = None, deliver: Deliver = log_notification) -> None:
    """Run the notification daemon until interrupted."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    daemon = create_daemon(config, deliver)
    logger.info("Starting tasktracker notification daemon...")
    daemon.scheduler.start()
