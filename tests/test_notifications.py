"""Tests for notification planning and the scheduler."""

import logging
from datetime import datetime, timedelta

import pytest

from tasktracker.core.notifications import (
    DIGEST_CANCEL_RANGE,
    DIGEST_LOOKAHEAD_DAYS,
    CancelNotifications,
    NotificationPreferences,
    ScheduleNotification,
    all_digest_ids,
    plan_digests,
    plan_due_notification,
    plan_reschedule,
)
from tasktracker.core.tasks import Priority, Task
from tasktracker.scheduling import NotificationScheduler

from fakes import RecordingNotificationService


# 2026-01-29 is a Thursday; the digest window runs Fri 01-30 .. Thu 02-05,
# with Monday 02-02 at offset 4.
@pytest.fixture
def now():
    return datetime(2026, 1, 29, 10, 0)


@pytest.fixture
def all_on():
    return NotificationPreferences(True, True, True, True)


@pytest.fixture
def make_task(now):
    def _make(task_id: str, due: datetime | None, completed: bool = False, title: str = "") -> Task:
        return Task(
            id=task_id,
            title=title or f"Task {task_id}",
            priority=Priority.MEDIUM,
            due_date=due,
            completed=completed,
            created_at=now,
        )
    return _make


def scheduled(ops) -> list[ScheduleNotification]:
    return [op for op in ops if isinstance(op, ScheduleNotification)]


class TestPreferences:
    def test_defaults_all_off(self):
        prefs = NotificationPreferences()
        assert not any(prefs.to_dict().values())

    def test_master_switch_gates_everything(self):
        prefs = NotificationPreferences(False, True, True, True)
        assert not prefs.effective_due_date
        assert not prefs.effective_daily
        assert not prefs.effective_weekly

    def test_effective_flags(self):
        prefs = NotificationPreferences(True, False, True, False)
        assert (prefs.effective_due_date, prefs.effective_daily, prefs.effective_weekly) == (False, True, False)

    def test_dict_keys(self, all_on):
        assert set(all_on.to_dict()) == {
            "notificationsEnabled", "notifyOnDueDate", "dailyDigestEnabled", "weeklyDigestEnabled",
        }
        assert NotificationPreferences.from_dict(all_on.to_dict()) == all_on


class TestDueNotification:
    def test_schedules_at_minute_precision(self, now, all_on, make_task):
        task = make_task("t1", datetime(2026, 1, 30, 14, 30, 45, 123), title="Submit report")
        assert plan_due_notification(task, all_on, now) == [
            CancelNotifications(("t1",)),
            ScheduleNotification(
                identifier="t1",
                title="Task Due",
                body='Your task "Submit report" is due now.',
                fire_at=datetime(2026, 1, 30, 14, 30),
            ),
        ]

    @pytest.mark.parametrize(
        "prefs",
        [
            NotificationPreferences(False, True, False, False),
            NotificationPreferences(True, False, True, True),
        ],
    )
    def test_disabled_only_cancels(self, now, make_task, prefs):
        task = make_task("t1", now + timedelta(days=1))
        assert plan_due_notification(task, prefs, now) == [CancelNotifications(("t1",))]

    def test_no_due_date_only_cancels(self, now, all_on, make_task):
        assert plan_due_notification(make_task("t1", None), all_on, now) == [CancelNotifications(("t1",))]

    @pytest.mark.parametrize("delta", [timedelta(0), timedelta(minutes=-1), timedelta(days=-3)])
    def test_not_in_future_only_cancels(self, now, all_on, make_task, delta):
        ops = plan_due_notification(make_task("t1", now + delta), all_on, now)
        assert ops == [CancelNotifications(("t1",))]

    def test_completed_only_cancels(self, now, all_on, make_task):
        ops = plan_due_notification(make_task("t1", now + timedelta(hours=2), completed=True), all_on, now)
        assert ops == [CancelNotifications(("t1",))]


class TestDigests:
    def test_disabled_only_blanket_cancel(self, now, make_task):
        prefs = NotificationPreferences(True, True, False, False)
        ops = plan_digests([make_task("t1", now + timedelta(days=1))], prefs, now)
        assert ops == [CancelNotifications(all_digest_ids())]

    def test_blanket_cancel_covers_0_to_14(self):
        ids = all_digest_ids()
        assert len(ids) == 30
        assert "digest_daily_0" in ids and "digest_weekly_14" in ids
        assert "digest_daily_15" not in ids

    def test_cancel_window_covers_lookahead(self):
        assert set(range(1, DIGEST_LOOKAHEAD_DAYS + 1)) <= set(DIGEST_CANCEL_RANGE)

    def test_master_off_disables_digests(self, now, make_task):
        prefs = NotificationPreferences(False, False, True, True)
        ops = plan_digests([make_task("t1", datetime(2026, 1, 30, 9, 0))], prefs, now)
        assert scheduled(ops) == []

    def test_daily_counts_same_calendar_day(self, now, make_task):
        prefs = NotificationPreferences(True, False, True, False)
        tasks = [
            make_task("a", datetime(2026, 1, 30, 9, 0)),
            make_task("b", datetime(2026, 1, 30, 3, 0)),  # before the 05:00 digest, still counts
            make_task("c", datetime(2026, 2, 3, 12, 0)),
            make_task("d", datetime(2026, 1, 31, 12, 0), completed=True),
            make_task("e", None),
        ]
        assert scheduled(plan_digests(tasks, prefs, now)) == [
            ScheduleNotification(
                identifier="digest_daily_1",
                title="Daily Task Summary",
                body="You have 2 tasks due today.",
                fire_at=datetime(2026, 1, 30, 5, 0),
            ),
            ScheduleNotification(
                identifier="digest_daily_5",
                title="Daily Task Summary",
                body="You have 1 tasks due today.",
                fire_at=datetime(2026, 2, 3, 5, 0),
            ),
        ]

    def test_daily_runs_on_monday_without_weekly(self, now, make_task):
        prefs = NotificationPreferences(True, False, True, False)
        ops = plan_digests([make_task("a", datetime(2026, 2, 2, 18, 0))], prefs, now)
        assert [op.identifier for op in scheduled(ops)] == ["digest_daily_4"]

    def test_today_is_never_a_digest_day(self, now, make_task):
        prefs = NotificationPreferences(True, False, True, False)
        ops = plan_digests([make_task("a", datetime(2026, 1, 29, 18, 0))], prefs, now)
        assert scheduled(ops) == []

    def test_weekly_on_monday_window(self, now, make_task):
        prefs = NotificationPreferences(True, False, False, True)
        tasks = [
            make_task("in-start", datetime(2026, 2, 2, 5, 0)),
            make_task("in-end", datetime(2026, 2, 9, 4, 59)),
            make_task("before", datetime(2026, 2, 2, 4, 59)),
            make_task("after", datetime(2026, 2, 9, 5, 0)),
        ]
        assert scheduled(plan_digests(tasks, prefs, now)) == [
            ScheduleNotification(
                identifier="digest_weekly_4",
                title="Weekly Task Summary",
                body="You have 2 tasks due this upcoming week.",
                fire_at=datetime(2026, 2, 2, 5, 0),
            ),
        ]

    def test_monday_suppresses_daily(self, now, all_on, make_task):
        tasks = [
            make_task("mon", datetime(2026, 2, 2, 10, 0)),
            make_task("wed", datetime(2026, 2, 4, 10, 0)),
        ]
        ops = scheduled(plan_digests(tasks, all_on, now))
        assert [op.identifier for op in ops] == ["digest_weekly_4", "digest_daily_6"]
        assert "digest_daily_4" not in [op.identifier for op in ops]

    def test_monday_with_empty_weekly_still_suppresses_daily(self, now, all_on, make_task):
        # due before the 05:00 weekly window opens, but on Monday's calendar day
        ops = plan_digests([make_task("early", datetime(2026, 2, 2, 3, 0))], all_on, now)
        assert scheduled(ops) == []

    def test_starts_with_cancel(self, now, all_on, make_task):
        ops = plan_digests([make_task("a", datetime(2026, 1, 30, 9, 0))], all_on, now)
        assert ops[0] == CancelNotifications(all_digest_ids())


class TestPlanReschedule:
    def test_due_alerts_then_digests(self, now, all_on, make_task):
        tasks = [make_task("t1", datetime(2026, 1, 30, 9, 0)), make_task("t2", None)]
        ops = plan_reschedule(tasks, all_on, now)
        assert ops[0] == CancelNotifications(("t1",))
        assert ops[1].identifier == "t1"
        assert ops[2] == CancelNotifications(("t2",))
        assert ops[3] == CancelNotifications(all_digest_ids())
        assert ops[4].identifier == "digest_daily_1"

    def test_idempotent(self, now, all_on, make_task):
        tasks = [
            make_task("t1", datetime(2026, 1, 30, 9, 0)),
            make_task("t2", datetime(2026, 2, 2, 10, 0)),
        ]
        assert plan_reschedule(tasks, all_on, now) == plan_reschedule(tasks, all_on, now)


class TestNotificationScheduler:
    def test_cancel_before_create(self, now, all_on, make_task):
        service = RecordingNotificationService()
        NotificationScheduler(service).schedule_task(make_task("t1", now + timedelta(hours=1)), all_on, now)
        assert service.calls == [("cancel", ("t1",)), ("create", "t1")]

    def test_reschedule_twice_leaves_same_pending_set(self, now, all_on, make_task):
        service = RecordingNotificationService()
        scheduler = NotificationScheduler(service)
        tasks = [
            make_task("t1", datetime(2026, 1, 30, 9, 0)),
            make_task("t2", datetime(2026, 2, 2, 10, 0)),
        ]
        first_ops = scheduler.reschedule(tasks, all_on, now)
        first = dict(service.pending)
        second_ops = scheduler.reschedule(tasks, all_on, now)
        assert second_ops == first_ops
        assert service.pending == first
        assert set(first) == {"t1", "t2", "digest_daily_1", "digest_weekly_4"}

    def test_disabling_clears_pending(self, now, all_on, make_task):
        service = RecordingNotificationService()
        scheduler = NotificationScheduler(service)
        tasks = [make_task("t1", datetime(2026, 1, 30, 9, 0))]
        scheduler.reschedule(tasks, all_on, now)
        scheduler.reschedule(tasks, NotificationPreferences(), now)
        assert service.pending == {}

    def test_service_errors_are_logged_not_raised(self, now, all_on, make_task, caplog):
        service = RecordingNotificationService(reject={"t1"})
        tasks = [make_task("t1", now + timedelta(hours=1)), make_task("t2", now + timedelta(hours=2))]
        with caplog.at_level(logging.ERROR, logger="tasktracker.scheduling"):
            NotificationScheduler(service).reschedule(tasks, all_on, now)
        assert "t2" in service.pending
        assert "t1" not in service.pending
        assert "rejected t1" in caplog.text

    def test_cancel_task(self):
        service = RecordingNotificationService()
        service.pending["gone"] = ("Task Due", "x", datetime(2030, 1, 1))
        NotificationScheduler(service).cancel_task("gone")
        assert service.pending == {}

    def test_refresh_digests_leaves_due_alerts(self, now, all_on, make_task):
        service = RecordingNotificationService()
        scheduler = NotificationScheduler(service)
        tasks = [make_task("t1", datetime(2026, 1, 30, 9, 0))]
        scheduler.reschedule(tasks, all_on, now)
        scheduler.refresh_digests([], all_on, now)
        assert set(service.pending) == {"t1"}
