"""
Command-line interface for horolog.

This module contains the argument parser and command handlers
for the CLI application.
"""

import argparse
import json
import subprocess
import sys
from typing import Optional

from . import __version__
from .constants import NO_WINDOW
from .models import HorologError
from .tracker import TimeTracker
from .utils import format_duration, parse_window

# Mode flags that take an optional "=<window>" suffix
WINDOW_FLAGS = {
    "-s", "--show",
    "-u", "--summary",
    "-t", "--timeline",
    "-a", "--amend", "--ammend",
}


def window_type(value: str):
    """argparse type for window values."""
    try:
        return parse_window(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def split_window_flags(argv: list[str]) -> list[str]:
    """
    Rewrite "--show=5d" style arguments into "--show --window=5d".

    Mode flags may carry their window directly, as in "-s=2h" or
    "--timeline=7d". Other arguments are passed through unchanged.
    """
    result = []
    for arg in argv:
        flag, sep, value = arg.partition("=")
        if sep and flag in WINDOW_FLAGS:
            result.extend([flag, f"--window={value}"])
        else:
            result.append(arg)
    return result


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="horolog",
        description="Track time spent on tasks as notes in a directory tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start logging in a task (opens $EDITOR, creates the directory if needed)
  %(prog)s task123/investigation

  # Total time, time of each subtask and all logged notes
  %(prog)s --show task123

  # Only the last 5 days
  %(prog)s --show=5d task123

  # Total time and time of each subtask
  %(prog)s -u=1h30m

  # Logs in order of completion over the last week
  %(prog)s -t=7d

  # Retroactively add 45 minutes to a task (negative values subtract)
  %(prog)s --amend=45m task123

Windows accept whole days (5d) or durations built from h, m and s (1h30m).
Log files are named "<start> => <end>.txt".
""",
    )

    parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Task directory (default: current directory)",
    )

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument(
        "-s", "--show",
        dest="mode",
        action="store_const",
        const="full",
        help="Show total time, time of each subtask and all logged text",
    )
    modes.add_argument(
        "-u", "--summary",
        dest="mode",
        action="store_const",
        const="summary",
        help="Only show total time and time of each subtask",
    )
    modes.add_argument(
        "-t", "--timeline",
        dest="mode",
        action="store_const",
        const="timeline",
        help="Show logs in the order they were finished",
    )
    modes.add_argument(
        "-a", "--amend", "--ammend",
        dest="mode",
        action="store_const",
        const="amend",
        help="Retroactively add the window's length of time to the task",
    )
    parser.set_defaults(mode="create")

    parser.add_argument(
        "-w", "--window",
        type=window_type,
        default=NO_WINDOW,
        help=(
            "Ignore activity older than this (units are d/h/m/s). "
            "Also given as --show=WINDOW, -u=WINDOW, etc."
        ),
    )
    parser.add_argument(
        "-e", "--editor",
        default=None,
        help="Editor used to write new logs (default: $EDITOR or vim)",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Output reports as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


# Command handlers

def cmd_create(tracker: TimeTracker, args) -> int:
    """Handle logging through the editor."""
    try:
        log = tracker.record()
    except subprocess.CalledProcessError as e:
        print(f"✗ Editor exited with status {e.returncode}, log saved anyway")
        return 1

    print(f"✓ Logged {format_duration(log.duration)} to {log.task_path}")
    return 0


def cmd_amend(tracker: TimeTracker, args) -> int:
    """Handle the 'amend' mode."""
    log = tracker.amend(args.window)
    print(f"✓ Amended {log.task_path} with {format_duration(log.duration)}")
    return 0


def cmd_report(tracker: TimeTracker, args) -> int:
    """Handle the 'show', 'summary' and 'timeline' modes."""
    result = tracker.report(args.mode, window=args.window, as_json=args.json)

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    print(result, end="")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(split_window_flags(argv))

    tracker = TimeTracker(
        task_path=args.directory,
        editor=args.editor,
        verbose=args.verbose,
    )

    # Command dispatch
    commands = {
        "create": cmd_create,
        "amend": cmd_amend,
        "full": cmd_report,
        "summary": cmd_report,
        "timeline": cmd_report,
    }

    handler = commands[args.mode]
    try:
        return handler(tracker, args)
    except (HorologError, OSError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
