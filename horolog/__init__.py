"""
horolog

A CLI tool that tracks time spent on tasks. Tasks are directories,
logs are text files named after the interval they cover.

License: MIT
"""

from .models import HorologError, InvalidLogError, InvalidTaskError, Log, Task
from .tracker import TimeTracker
from .utils import decode_interval, encode_interval, format_duration, parse_window

__version__ = "1.4.0"
__all__ = [
    "HorologError",
    "InvalidLogError",
    "InvalidTaskError",
    "Log",
    "Task",
    "TimeTracker",
    "decode_interval",
    "encode_interval",
    "format_duration",
    "parse_window",
]
