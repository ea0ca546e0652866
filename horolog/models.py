"""
Data models for horolog.

This module contains the Log and Task classes. A task is a directory,
a log is a file inside it whose name encodes the interval it covers.
Nothing is cached: every query scans the filesystem again.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from .constants import LOG_SUFFIX, NO_WINDOW, TASK_DIR_MODE
from .utils import decode_interval, format_duration, format_timestamp, local_now


class HorologError(Exception):
    """Base class for horolog errors."""


class InvalidLogError(HorologError, ValueError):
    """Raised when a path is not a valid log file."""


class InvalidTaskError(HorologError, FileNotFoundError):
    """Raised when a path is not an existing task directory."""


@dataclass(frozen=True)
class Log:
    """
    Represents a single log file.

    Attributes:
        path: Path of the log file. Its name is "<start> => <end>.txt".
        start: Start of the logged interval.
        end: End of the logged interval.
    """
    path: Path
    start: datetime
    end: datetime

    @classmethod
    def load(cls, path) -> "Log":
        """
        Load a log from an existing file.

        Args:
            path: Path to the log file.

        Returns:
            The loaded Log.

        Raises:
            InvalidLogError: If the path does not exist, is a directory,
                or its name does not encode a valid interval.
        """
        path = Path(path)
        if not path.exists() or path.is_dir():
            raise InvalidLogError(f"Invalid log file: {path}")

        name = path.name
        if name.endswith(LOG_SUFFIX):
            name = name[:-len(LOG_SUFFIX)]

        interval = decode_interval(name)
        if interval is None:
            raise InvalidLogError(f"Invalid log file: {path}")

        start, end = interval
        return cls(path=path, start=start, end=end)

    @property
    def duration(self) -> timedelta:
        """Time covered by the log. Negative if end precedes start."""
        return self.end - self.start

    @property
    def task_path(self) -> Path:
        """Directory of the task the log belongs to."""
        return self.path.parent

    @property
    def text(self) -> str:
        """
        Read the notes stored in the log.

        Bytes that are not valid UTF-8 are replaced rather than rejected.

        Raises:
            OSError: If the file cannot be read.
        """
        return self.path.read_text(encoding="utf-8", errors="replace")

    def ends_within(self, window: timedelta, now: datetime) -> bool:
        """Check whether the log ended inside the window before now."""
        if window == NO_WINDOW:
            return True
        return self.end >= now - window

    def to_dict(self, include_text: bool = False) -> dict:
        """Convert to dictionary for JSON export."""
        data = {
            "path": str(self.path),
            "task": str(self.task_path),
            "start": format_timestamp(self.start),
            "end": format_timestamp(self.end),
            "duration_seconds": self.duration.total_seconds(),
            "duration": format_duration(self.duration),
        }
        if include_text:
            data["text"] = self.text
        return data

    def __repr__(self) -> str:
        return f"Log(path={str(self.path)!r}, duration={format_duration(self.duration)!r})"


@dataclass(frozen=True)
class Task:
    """
    Represents a task directory.

    The path is also the display name of the task. Subtasks are the
    subdirectories, logs are the files with a valid log name; other
    entries are ignored.

    Attributes:
        path: Path of the task directory.
    """
    path: Path

    @classmethod
    def load(cls, path) -> "Task":
        """
        Load an existing task directory.

        Raises:
            InvalidTaskError: If the path does not exist or is not a directory.
        """
        path = Path(path)
        if not path.is_dir():
            raise InvalidTaskError(f"Invalid task directory: {path}")
        return cls(path=path)

    @classmethod
    def ensure_exists(cls, path) -> "Task":
        """
        Create the task directory and any missing parents.

        Succeeds without changes if the directory already exists.

        Raises:
            OSError: If the directory cannot be created, e.g. because a
                file is in the way or permission is denied.
        """
        path = Path(path)
        path.mkdir(mode=TASK_DIR_MODE, parents=True, exist_ok=True)
        return cls.load(path)

    @property
    def name(self) -> str:
        return str(self.path)

    def _entries(self) -> list[Path]:
        # A directory that cannot be listed has no visible children
        try:
            entries = list(self.path.iterdir())
        except OSError:
            return []
        return sorted(entries, key=lambda p: p.name)

    def direct_logs(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
    ) -> list[Log]:
        """
        Get the logs stored directly in this task.

        Entries that are not valid logs are skipped.

        Args:
            window: Only include logs that ended within this long before
                now. A zero window includes every log.
            now: Reference time for the window. Defaults to the current time.

        Returns:
            Logs in directory-listing order.
        """
        if now is None:
            now = local_now()

        logs = []
        for entry in self._entries():
            try:
                log = Log.load(entry)
            except InvalidLogError:
                continue
            if log.ends_within(window, now):
                logs.append(log)
        return logs

    def subtasks(self) -> list["Task"]:
        """Get the immediate subtasks in directory-listing order."""
        tasks = []
        for entry in self._entries():
            try:
                tasks.append(Task.load(entry))
            except InvalidTaskError:
                continue
        return tasks

    def direct_duration(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
    ) -> timedelta:
        """Total duration of the direct logs within the window."""
        return sum((log.duration for log in self.direct_logs(window, now)), timedelta(0))

    def recursive_duration(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
    ) -> timedelta:
        """Total duration of this task and all of its subtasks."""
        if now is None:
            now = local_now()
        total = self.direct_duration(window, now)
        for subtask in self.subtasks():
            total += subtask.recursive_duration(window, now)
        return total

    def recursive_logs(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
    ) -> list[Log]:
        """
        Get the logs of this task followed by those of every subtask.

        The result is in depth-first listing order, not sorted by time.
        """
        if now is None:
            now = local_now()
        logs = self.direct_logs(window, now)
        for subtask in self.subtasks():
            logs.extend(subtask.recursive_logs(window, now))
        return logs

    def _header(self, logs: list[Log]) -> str:
        duration = sum((log.duration for log in logs), timedelta(0))
        return f"{self.name} ({format_duration(duration)})\n"

    def summary_text(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Build one line per task that has logs within the window.

        Each line is "<path> (<duration>)" where the duration only counts
        the task's direct logs. Tasks are listed depth-first, parents
        before their subtasks.
        """
        if now is None:
            now = local_now()

        text = ""
        logs = self.direct_logs(window, now)
        if logs:
            text += self._header(logs)

        for subtask in self.subtasks():
            text += subtask.summary_text(window, now)
        return text

    def full_text(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Like summary_text, but with the notes of every log after the
        task's line, followed by a blank line.
        """
        if now is None:
            now = local_now()

        text = ""
        logs = self.direct_logs(window, now)
        if logs:
            text += self._header(logs)
            for log in logs:
                text += log.text
            text += "\n"

        for subtask in self.subtasks():
            text += subtask.full_text(window, now)
        return text

    def to_dict(
        self,
        window: timedelta = NO_WINDOW,
        now: Optional[datetime] = None,
        include_text: bool = False,
    ) -> dict:
        """Convert the task tree to a dictionary for JSON export."""
        if now is None:
            now = local_now()

        logs = self.direct_logs(window, now)
        direct = sum((log.duration for log in logs), timedelta(0))
        subtasks = [
            subtask.to_dict(window, now, include_text)
            for subtask in self.subtasks()
        ]
        total = direct + sum(
            (timedelta(seconds=s["total_seconds"]) for s in subtasks), timedelta(0)
        )
        return {
            "path": self.name,
            "direct_seconds": direct.total_seconds(),
            "total_seconds": total.total_seconds(),
            "logs": [log.to_dict(include_text) for log in logs],
            "subtasks": subtasks,
        }

    def __repr__(self) -> str:
        return f"Task(path={self.name!r})"
