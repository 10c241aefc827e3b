"""tasktracker CLI - voice memo task capture and notifications."""

import json
import logging
import sys

import click

from .config import load_config
from .core.notifications import CancelNotifications, NotificationOp, ScheduleNotification
from .core.tasks import CandidateTask, Priority, Task, filter_completed, filter_todo, sort_by_priority
from .workflows import (
    PREFERENCE_FLAGS,
    add_task,
    delete_task,
    extract_candidates,
    get_preferences_store,
    get_task_store,
    local_now,
    parse_due_input,
    plan_notifications,
    save_candidates,
    set_completed,
    update_preferences,
)

PRIORITY_CHOICE = click.Choice(["low", "medium", "high"], case_sensitive=False)


@click.group()
@click.version_option(package_name="tasktracker")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """tasktracker - turn voice memo transcripts into tasks."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _read_transcript(text: str | None, file) -> str:
    if text:
        return text
    if file is not None:
        return file.read()
    if not sys.stdin.isatty():
        return sys.stdin.read()
    raise click.UsageError("Provide a transcript as an argument, with --file, or on stdin.")


def _candidate_dict(c: CandidateTask) -> dict:
    return {
        "title": c.title,
        "priority": c.priority.title.lower(),
        "dueDateDescription": c.due_date_phrase,
    }


def _task_dict(t: Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "priority": t.priority.title.lower(),
        "due_date": t.due_date.isoformat() if t.due_date else None,
        "completed": t.completed,
    }


def _format_candidate(c: CandidateTask) -> str:
    due = f" ({c.due_date_phrase})" if c.due_date_phrase else ""
    return f"[{c.priority.title:6}] {c.title}{due}"


def _format_task(t: Task) -> str:
    check = "x" if t.completed else " "
    due = f" (due {t.due_date:%a %b %d %H:%M})" if t.due_date else ""
    return f"[{check}] {t.id[:8]}  {t.priority.title:6} {t.title}{due}"


def _format_op(op: NotificationOp) -> str:
    match op:
        case CancelNotifications(identifiers=identifiers):
            if len(identifiers) == 1:
                return f"cancel   {identifiers[0]}"
            return f"cancel   {len(identifiers)} ids ({identifiers[0]} .. {identifiers[-1]})"
        case ScheduleNotification():
            return f"schedule {op.identifier} at {op.fire_at:%Y-%m-%d %H:%M}: {op.title} - {op.body}"
    return repr(op)


@main.command()
@click.argument("text", required=False)
@click.option("--file", "-f", type=click.File("r"), help="Read the transcript from a file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--no-model", is_flag=True, help="Skip the model and use keyword heuristics only")
def extract(text: str | None, file, as_json: bool, no_model: bool):
    """Extract candidate tasks from a transcript without saving them."""
    config = load_config()
    transcript = _read_transcript(text, file)
    candidates = extract_candidates(config, transcript, use_model=not no_model)

    if as_json:
        click.echo(json.dumps([_candidate_dict(c) for c in candidates], indent=2))
        return

    if not candidates:
        click.echo("No tasks found.")
        return

    for candidate in candidates:
        click.echo(_format_candidate(candidate))


@main.command()
@click.argument("text", required=False)
@click.option("--file", "-f", type=click.File("r"), help="Read the transcript from a file")
@click.option("--no-model", is_flag=True, help="Skip the model and use keyword heuristics only")
@click.option("--yes", "-y", is_flag=True, help="Accept every extracted task without asking")
def capture(text: str | None, file, no_model: bool, yes: bool):
    """Extract tasks from a transcript, review them, and save the selected ones."""
    config = load_config()
    transcript = _read_transcript(text, file)
    candidates = extract_candidates(config, transcript, use_model=not no_model)

    if not candidates:
        click.echo("No tasks found.")
        return

    if not yes:
        # stdin may already be consumed by the transcript
        if not sys.stdin.isatty() and text is None and file is None:
            raise click.UsageError("Cannot review interactively when the transcript is piped; use --yes.")
        for candidate in candidates:
            candidate.selected = click.confirm(_format_candidate(candidate), default=True)

    store = get_task_store(config)
    saved = save_candidates(store, candidates, local_now(config))
    if not saved:
        click.echo("No tasks added.")
        return
    for task in saved:
        click.echo(f"✓ {_format_task(task)}")


@main.command()
@click.argument("title")
@click.option("--priority", "-p", type=PRIORITY_CHOICE, default="medium", show_default=True)
@click.option("--due", "-d", default=None, help='Due date: a phrase like "tomorrow" or an ISO date')
def add(title: str, priority: str, due: str | None):
    """Add a task by hand."""
    config = load_config()
    now = local_now(config)
    due_date = parse_due_input(due, now)
    if due and due_date is None:
        click.echo(f"Warning: couldn't understand due date {due!r}, saving without one.", err=True)

    try:
        task = add_task(get_task_store(config), title, Priority.parse(priority), due_date, now)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"✓ {_format_task(task)}")


@main.command("list")
@click.option("--completed", is_flag=True, help="Show completed tasks instead")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(completed: bool, as_json: bool):
    """List tasks, highest priority first."""
    config = load_config()
    try:
        tasks = get_task_store(config).fetch_all()
    except RuntimeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    tasks = sort_by_priority(filter_completed(tasks) if completed else filter_todo(tasks))

    if as_json:
        click.echo(json.dumps([_task_dict(t) for t in tasks], indent=2))
        return

    if not tasks:
        click.echo("No tasks.")
        return

    for task in tasks:
        click.echo(_format_task(task))


def _mark(task_id: str, completed: bool) -> None:
    config = load_config()
    try:
        task = set_completed(get_task_store(config), task_id, completed)
    except KeyError:
        click.echo(f"Error: no task matching {task_id!r}", err=True)
        sys.exit(1)
    click.echo(_format_task(task))


@main.command()
@click.argument("task_id")
def done(task_id: str):
    """Mark a task completed."""
    _mark(task_id, True)


@main.command()
@click.argument("task_id")
def undo(task_id: str):
    """Mark a completed task as not done."""
    _mark(task_id, False)


@main.command()
@click.argument("task_id")
def delete(task_id: str):
    """Delete a task."""
    config = load_config()
    try:
        task = delete_task(get_task_store(config), task_id)
    except KeyError:
        click.echo(f"Error: no task matching {task_id!r}", err=True)
        sys.exit(1)
    click.echo(f"Deleted: {task.title}")


@main.command()
@click.option("--notifications/--no-notifications", default=None, help="Master notification switch")
@click.option("--due/--no-due", default=None, help="Notify when a task is due")
@click.option("--daily/--no-daily", default=None, help="Daily digest at 05:00")
@click.option("--weekly/--no-weekly", default=None, help="Weekly digest on Mondays at 05:00")
def prefs(notifications: bool | None, due: bool | None, daily: bool | None, weekly: bool | None):
    """Show or change notification preferences."""
    config = load_config()
    current = update_preferences(
        get_preferences_store(config),
        notifications=notifications,
        due=due,
        daily=daily,
        weekly=weekly,
    )
    for name, attr in PREFERENCE_FLAGS.items():
        state = "on" if getattr(current, attr) else "off"
        click.echo(f"{name:14} {state}")
    if not current.notifications_enabled:
        click.echo("(notifications are off, nothing will be scheduled)")


@main.command()
def plan():
    """Show the notification operations a reschedule would issue now."""
    config = load_config()
    ops = plan_notifications(get_task_store(config), get_preferences_store(config), local_now(config))
    for op in ops:
        click.echo(_format_op(op))


@main.command()
def run():
    """Run the notification daemon."""
    from .daemon import run_daemon

    def deliver(title: str, body: str) -> None:
        click.echo(f"🔔 {title}: {body}")

    click.echo("Starting tasktracker notification daemon...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_daemon(load_config(), deliver=deliver)
    except (KeyboardInterrupt, SystemExit):
        click.echo("\nDaemon stopped.")


if __name__ == "__main__":
    main()
