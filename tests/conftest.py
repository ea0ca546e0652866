"""
Pytest Configuration and Shared Fixtures
========================================

Provides helpers for building task trees on disk.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from horolog.utils import encode_interval

UTC = timezone.utc


def dt(*args) -> datetime:
    """Build a UTC datetime."""
    return datetime(*args, tzinfo=UTC)


def write_log(directory: Path, start: datetime, end: datetime, text: str = "") -> Path:
    """Create a log file for the interval in a task directory."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / (encode_interval(start, end) + ".txt")
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    A task "proj" with two direct logs (1h "A", 30m "B") and a
    subtask "proj/sub" with one 2h log "C".
    """
    proj = tmp_path / "proj"
    write_log(proj, dt(2024, 1, 1, 9), dt(2024, 1, 1, 10), "A\n")
    write_log(proj, dt(2024, 1, 1, 10), dt(2024, 1, 1, 10, 30), "B\n")
    write_log(proj / "sub", dt(2024, 1, 1, 6), dt(2024, 1, 1, 8), "C\n")
    return proj


@pytest.fixture
def now() -> datetime:
    """A fixed reference time for window filtering."""
    return dt(2024, 2, 1, 12)


def days_ago(now: datetime, days: float) -> datetime:
    return now - timedelta(days=days)
