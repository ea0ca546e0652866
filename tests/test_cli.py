"""
Tests for horolog/cli.py
========================

Argument handling and command dispatch.
"""

import json
from datetime import timedelta
from unittest.mock import patch

import pytest

from conftest import dt, write_log
from horolog.cli import create_parser, main, split_window_flags
from horolog.models import Task
from horolog.utils import local_now


class TestArguments:
    """Tests for argument parsing."""

    def test_split_window_flags(self):
        assert split_window_flags(["-s=5d", "proj"]) == ["-s", "--window=5d", "proj"]
        assert split_window_flags(["--timeline=-1h"]) == ["--timeline", "--window=-1h"]
        assert split_window_flags(["odd=name"]) == ["odd=name"]

    def test_defaults(self):
        args = create_parser().parse_args([])
        assert args.mode == "create"
        assert args.directory == "."
        assert args.window == timedelta(0)

    def test_mode_with_window(self):
        args = create_parser().parse_args(split_window_flags(["--summary=1h30m", "proj"]))
        assert args.mode == "summary"
        assert args.directory == "proj"
        assert args.window == timedelta(hours=1, minutes=30)

    def test_mode_without_window(self):
        args = create_parser().parse_args(split_window_flags(["-t", "proj"]))
        assert args.mode == "timeline"
        assert args.window == timedelta(0)

    def test_ammend_alias(self):
        args = create_parser().parse_args(split_window_flags(["--ammend=2h"]))
        assert args.mode == "amend"
        assert args.window == timedelta(hours=2)

    def test_empty_window_is_an_error(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--show="])
        assert exc.value.code == 2
        assert "No duration specified" in capsys.readouterr().err

    def test_bad_window_is_an_error(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["-u=soon", str(tmp_path)])

    def test_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            main(["-s", "-u"])


class TestCommands:
    """Tests for the command handlers."""

    def test_summary(self, project, capsys):
        assert main(["--summary", str(project)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Total: 3h30m0s\n\n")
        assert f"{project / 'sub'} (2h0m0s)" in out

    def test_show(self, project, capsys):
        assert main(["-s", str(project)]) == 0
        assert "A\nB\n" in capsys.readouterr().out

    def test_timeline_json(self, project, capsys):
        assert main(["-t", "--json", str(project)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [entry["text"] for entry in data] == ["C\n", "A\n", "B\n"]

    def test_window_filter(self, tmp_path, capsys):
        now = local_now()
        old = now - timedelta(days=10)
        write_log(tmp_path, old - timedelta(hours=1), old, "old\n")

        main(["-u=5d", str(tmp_path)])
        assert capsys.readouterr().out == "Total: 0s\n\n"

        main(["-u=20d", str(tmp_path)])
        assert capsys.readouterr().out.startswith("Total: 1h0m0s")

    def test_show_with_invalid_utf8_notes(self, tmp_path, capsys):
        path = write_log(tmp_path, dt(2024, 1, 1, 9), dt(2024, 1, 1, 10))
        path.write_bytes(b"caf\xe9 notes\n")
        assert main(["--show", str(tmp_path)]) == 0
        assert main(["--timeline", str(tmp_path)]) == 0
        assert "notes" in capsys.readouterr().out

    def test_missing_task(self, tmp_path, capsys):
        assert main(["--show", str(tmp_path / "missing")]) == 1
        assert "Error: Invalid task directory" in capsys.readouterr().out

    def test_amend(self, tmp_path, capsys):
        target = tmp_path / "a" / "b"
        assert main(["-a=30m", str(target)]) == 0
        assert "✓ Amended" in capsys.readouterr().out
        assert Task.load(target).direct_duration() == timedelta(minutes=30)

    def test_create(self, tmp_path, capsys):
        with patch("horolog.tracker.subprocess.run") as run:
            assert main(["--editor", "true", str(tmp_path / "task")]) == 0

        assert run.call_args[0][0][0] == "true"
        assert len(Task.load(tmp_path / "task").direct_logs()) == 1
        assert "✓ Logged" in capsys.readouterr().out

    def test_create_editor_error(self, tmp_path, capsys):
        with patch("horolog.tracker.subprocess.run", side_effect=OSError("not found")):
            assert main(["-e", "missing-editor", str(tmp_path)]) == 1
        assert "Error: not found" in capsys.readouterr().out
        assert len(Task.load(tmp_path).direct_logs()) == 1
