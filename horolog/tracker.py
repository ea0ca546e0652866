"""
Core tracker functionality for horolog.

This module contains the TimeTracker class that resolves the task
directory and records new logs, either through an editor session or
as an empty amendment.
"""

import os
import shlex
import shutil
import subprocess
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from .constants import DEFAULT_EDITOR, EDITOR_ENV_VAR, LOG_SUFFIX, NO_WINDOW
from .models import InvalidTaskError, Log, Task
from .reports import (
    full_json,
    full_report,
    summary_json,
    summary_report,
    timeline_json,
    timeline_report,
)
from .utils import encode_interval, local_now


class TimeTracker:
    """
    Main class for recording and reporting time on a task directory.

    This class provides methods to:
    - Record a log by editing notes in an external editor
    - Amend a task with an empty log covering a past interval
    - Build the full, summary and timeline reports

    Example:
        >>> tracker = TimeTracker("work/project")
        >>> tracker.amend(timedelta(hours=1))
        >>> print(tracker.report("summary"))
    """

    def __init__(
        self,
        task_path: str = ".",
        editor: Optional[str] = None,
        verbose: bool = False,
        clock: Callable[[], datetime] = local_now,
    ):
        """
        Initialize the tracker.

        Args:
            task_path: Directory of the task to work on.
            editor: Editor command for new logs. If None, uses $EDITOR,
                falling back to vim.
            verbose: Enable verbose output for debugging.
            clock: Source of the current time.
        """
        self.verbose = verbose
        self.task_path = Path(task_path)
        self.editor = editor or os.environ.get(EDITOR_ENV_VAR) or DEFAULT_EDITOR
        self.clock = clock

    def _log(self, message: str) -> None:
        """Log a message if verbose mode is enabled."""
        if self.verbose:
            print(f"[INFO] {message}")

    def load_task(self) -> Task:
        """
        Load the task directory.

        Raises:
            InvalidTaskError: If the directory does not exist.
        """
        return Task.load(self.task_path)

    def ensure_task(self) -> Task:
        """
        Load the task directory, creating it if it does not exist.

        Raises:
            OSError: If the directory cannot be created.
        """
        try:
            return Task.load(self.task_path)
        except InvalidTaskError:
            self._log(f"Creating task directory: {self.task_path}")
            return Task.ensure_exists(self.task_path)

    def _log_path(self, task: Task, start: datetime, end: datetime) -> Path:
        return task.path / (encode_interval(start, end) + LOG_SUFFIX)

    def amend(self, window: timedelta = NO_WINDOW) -> Log:
        """
        Add an empty log covering the last `window` of time.

        A negative window produces a log with a negative duration,
        which subtracts from the task's total.

        Returns:
            The created log.
        """
        task = self.ensure_task()
        end = self.clock()
        start = end - window

        path = self._log_path(task, start, end)
        path.touch()
        self._log(f"Amended {task.name} with {path.name}")
        return Log.load(path)

    def record(self) -> Log:
        """
        Record a new log by running the editor on a temporary file.

        The start time is taken before the editor is launched and the
        end time after it exits. The temporary file is copied into the
        task directory whether or not the editor succeeded; if the copy
        fails an empty log is created in its place and the temporary
        file is left behind.

        Returns:
            The created log.

        Raises:
            OSError: If the editor cannot be started.
            subprocess.CalledProcessError: If the editor exits with an error.
        """
        task = self.ensure_task()

        prefix = str(task.path).replace("/", "_").strip("_") or "task"
        fd, tmp_name = tempfile.mkstemp(prefix=f"{prefix}-", suffix=LOG_SUFFIX)
        os.close(fd)
        tmp_path = Path(tmp_name)

        command = shlex.split(self.editor) + [str(tmp_path)]
        start = self.clock()
        try:
            self._log(f"Launching editor: {' '.join(command)}")
            subprocess.run(command, check=True)
        finally:
            end = self.clock()
            path = self._log_path(task, start, end)
            try:
                shutil.copyfile(tmp_path, path)
            except OSError as e:
                self._log(f"Copy failed ({e}), notes kept in {tmp_path}")
                path.touch()
            else:
                tmp_path.unlink()
                self._log(f"Saved log: {path}")

        return Log.load(path)

    def report(
        self,
        kind: str,
        window: timedelta = NO_WINDOW,
        as_json: bool = False,
    ):
        """
        Build a report for the task.

        Args:
            kind: One of "full", "summary" or "timeline".
            window: Only include logs that ended within this long before
                now. A zero window includes everything.
            as_json: Return a JSON-ready structure instead of text.

        Returns:
            Report text, or a dict/list when as_json is True.

        Raises:
            InvalidTaskError: If the task directory does not exist.
            ValueError: If the report kind is unknown.
        """
        builders = {
            "full": (full_report, full_json),
            "summary": (summary_report, summary_json),
            "timeline": (timeline_report, timeline_json),
        }
        if kind not in builders:
            raise ValueError(f"Unknown report: {kind}")

        task = self.load_task()
        now = self.clock()
        self._log(f"Building {kind} report for {task.name}")

        text_builder, json_builder = builders[kind]
        builder = json_builder if as_json else text_builder
        return builder(task, window, now)
