"""
Report formatters for horolog.

Each report comes in a text form for the terminal and a JSON-ready
form for --json output. All of them are built from Task queries.
"""

from datetime import datetime, timedelta
from typing import Optional

from .constants import NO_WINDOW
from .models import Log, Task
from .utils import format_duration, format_timestamp, local_now


def timeline_logs(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> list[Log]:
    """Get every log under the task, sorted by end time (oldest first)."""
    return sorted(task.recursive_logs(window, now), key=lambda log: log.end)


def timeline_report(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> str:
    """
    Build the timeline report.

    For each log, in order of end time, a line with its start, duration
    and task directory, followed by the notes of the log.
    """
    lines = []
    for log in timeline_logs(task, window, now):
        lines.append(
            f"{format_timestamp(log.start)} {format_duration(log.duration)}"
            f"\t\t{log.task_path}"
        )
        lines.append(log.text)
    return "\n".join(lines) + "\n" if lines else ""


def _total_line(task: Task, window: timedelta, now: datetime) -> str:
    return f"Total: {format_duration(task.recursive_duration(window, now))}\n\n"


def summary_report(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> str:
    """Build the summary report: total time, then one line per task."""
    if now is None:
        now = local_now()
    return _total_line(task, window, now) + task.summary_text(window, now)


def full_report(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> str:
    """Build the full report: total time, then each task with its notes."""
    if now is None:
        now = local_now()
    return _total_line(task, window, now) + task.full_text(window, now)


def timeline_json(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> list[dict]:
    """Timeline as a list of log dictionaries."""
    return [log.to_dict(include_text=True) for log in timeline_logs(task, window, now)]


def summary_json(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> dict:
    """Task tree with durations, without notes."""
    return task.to_dict(window, now, include_text=False)


def full_json(
    task: Task,
    window: timedelta = NO_WINDOW,
    now: Optional[datetime] = None,
) -> dict:
    """Task tree with durations and notes."""
    return task.to_dict(window, now, include_text=True)
