"""Notification planning - pure scheduling policy, no I/O.

Every function here turns (tasks, preferences, now) into a list of
operations for a notification service. Nothing reads back what is
currently pending: a plan always cancels every identifier it could own
and then recreates what should exist.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

from .dates import start_of_day
from .tasks import Task, filter_todo

DUE_NOTIFICATION_TITLE = "Task Due"
DAILY_DIGEST_TITLE = "Daily Task Summary"
WEEKLY_DIGEST_TITLE = "Weekly Task Summary"

DIGEST_HOUR = 5
DIGEST_LOOKAHEAD_DAYS = 7
# Digest ids are only ever cancelled inside this window; it must cover the
# lookahead.
DIGEST_CANCEL_RANGE = range(0, 15)

MONDAY = 0  # datetime.weekday()


def _flag(data: dict, key: str) -> bool:
    """A stored switch; anything but a real boolean counts as off."""
    value = data.get(key, False)
    return value if isinstance(value, bool) else False


@dataclass
class NotificationPreferences:
    """User notification switches. The master switch gates the others."""

    notifications_enabled: bool = False
    notify_on_due_date: bool = False
    daily_digest_enabled: bool = False
    weekly_digest_enabled: bool = False

    @property
    def effective_due_date(self) -> bool:
        return self.notifications_enabled and self.notify_on_due_date

    @property
    def effective_daily(self) -> bool:
        return self.notifications_enabled and self.daily_digest_enabled

    @property
    def effective_weekly(self) -> bool:
        return self.notifications_enabled and self.weekly_digest_enabled

    def to_dict(self) -> dict:
        return {
            "notificationsEnabled": self.notifications_enabled,
            "notifyOnDueDate": self.notify_on_due_date,
            "dailyDigestEnabled": self.daily_digest_enabled,
            "weeklyDigestEnabled": self.weekly_digest_enabled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "NotificationPreferences":
        return cls(
            notifications_enabled=_flag(data, "notificationsEnabled"),
            notify_on_due_date=_flag(data, "notifyOnDueDate"),
            daily_digest_enabled=_flag(data, "dailyDigestEnabled"),
            weekly_digest_enabled=_flag(data, "weeklyDigestEnabled"),
        )


@dataclass(frozen=True)
class CancelNotifications:
    """Remove pending notifications by identifier."""

    identifiers: tuple[str, ...]


@dataclass(frozen=True)
class ScheduleNotification:
    """Create a one-shot notification firing at `fire_at` (minute precision)."""

    identifier: str
    title: str
    body: str
    fire_at: datetime


NotificationOp = CancelNotifications | ScheduleNotification


def due_notification_id(task: Task) -> str:
    return str(task.id)


def daily_digest_id(offset: int) -> str:
    return f"digest_daily_{offset}"


def weekly_digest_id(offset: int) -> str:
    return f"digest_weekly_{offset}"


def all_digest_ids() -> tuple[str, ...]:
    ids = []
    for i in DIGEST_CANCEL_RANGE:
        ids.append(daily_digest_id(i))
        ids.append(weekly_digest_id(i))
    return tuple(ids)


def truncate_to_minute(moment: datetime) -> datetime:
    return moment.replace(second=0, microsecond=0)


def plan_due_notification(
    task: Task,
    prefs: NotificationPreferences,
    now: datetime,
) -> list[NotificationOp]:
    """
    Plan the due alert for a single task.

    Always starts with a cancel for the task's id, so at most one alert per
    task is ever pending.
    """
    ops: list[NotificationOp] = [CancelNotifications((due_notification_id(task),))]

    if not prefs.effective_due_date:
        return ops
    # completing a task clears its alert on the next reschedule
    if task.completed or task.due_date is None or task.due_date <= now:
        return ops

    ops.append(
        ScheduleNotification(
            identifier=due_notification_id(task),
            title=DUE_NOTIFICATION_TITLE,
            body=f'Your task "{task.title}" is due now.',
            fire_at=truncate_to_minute(task.due_date),
        )
    )
    return ops


def tasks_due_on(tasks: list[Task], day: datetime) -> list[Task]:
    """Incomplete tasks due on the same calendar day as `day`, any time of day."""
    return [t for t in filter_todo(tasks) if t.due_date and t.due_date.date() == day.date()]


def tasks_due_between(tasks: list[Task], start: datetime, end: datetime) -> list[Task]:
    """Incomplete tasks due in [start, end)."""
    return [t for t in filter_todo(tasks) if t.due_date and start <= t.due_date < end]


def digest_fire_date(now: datetime, offset: int) -> datetime:
    day = start_of_day(now) + timedelta(days=offset)
    return datetime.combine(day.date(), time(DIGEST_HOUR, 0), tzinfo=day.tzinfo)


def plan_digests(
    tasks: list[Task],
    prefs: NotificationPreferences,
    now: datetime,
) -> list[NotificationOp]:
    """
    Plan daily and weekly digest notifications for the next week.

    On Mondays a weekly digest replaces the daily one when weekly digests
    are enabled, even if the weekly digest ends up empty.
    """
    ops: list[NotificationOp] = [CancelNotifications(all_digest_ids())]

    daily = prefs.effective_daily
    weekly = prefs.effective_weekly
    if not daily and not weekly:
        return ops

    for offset in range(1, DIGEST_LOOKAHEAD_DAYS + 1):
        fire_at = digest_fire_date(now, offset)

        if fire_at.weekday() == MONDAY and weekly:
            due = tasks_due_between(tasks, fire_at, fire_at + timedelta(days=7))
            if due:
                ops.append(
                    ScheduleNotification(
                        identifier=weekly_digest_id(offset),
                        title=WEEKLY_DIGEST_TITLE,
                        body=f"You have {len(due)} tasks due this upcoming week.",
                        fire_at=fire_at,
                    )
                )
        elif daily:
            due = tasks_due_on(tasks, fire_at)
            if due:
                ops.append(
                    ScheduleNotification(
                        identifier=daily_digest_id(offset),
                        title=DAILY_DIGEST_TITLE,
                        body=f"You have {len(due)} tasks due today.",
                        fire_at=fire_at,
                    )
                )

    return ops


def plan_reschedule(
    tasks: list[Task],
    prefs: NotificationPreferences,
    now: datetime,
) -> list[NotificationOp]:
    """
    Plan every notification for the current task set.

    Per-task due alerts first, in task order, then digests. Deterministic:
    the same inputs always give the same list.
    """
    ops: list[NotificationOp] = []
    for task in tasks:
        ops.extend(plan_due_notification(task, prefs, now))
    ops.extend(plan_digests(tasks, prefs, now))
    return ops
