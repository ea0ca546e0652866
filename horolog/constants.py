"""
Constants for horolog.

Filename layout of log files and the defaults used by the CLI.
"""

from datetime import timedelta

# Layout of a single timestamp inside a log filename: 2024-01-01 09:00:00+01:00
TIME_PATTERN = r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}"
TIME_LAYOUT = "%Y-%m-%d %H:%M:%S%z"

# Separator between the start and end timestamp of a log filename
TIME_DELIMITER = " => "

# Extension of log files
LOG_SUFFIX = ".txt"

# Editor used for new logs when $EDITOR is unset
DEFAULT_EDITOR = "vim"
EDITOR_ENV_VAR = "EDITOR"

# Permissions for newly created task directories
TASK_DIR_MODE = 0o700

# A zero window disables time filtering
NO_WINDOW = timedelta(0)

# Seconds per unit of the window mini-language
DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1,
    "m": 60,
    "h": 3600,
}
SECONDS_PER_DAY = 86400
