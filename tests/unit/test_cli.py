"""Unit tests for notifier.cli module.

These tests verify CLI orchestration behaviour, not engine internals.
"""

import json
from unittest.mock import Mock

import pytest

from notifier.cli import format_report, main


@pytest.fixture
def mock_drill_runner(monkeypatch):
    """Mock DrillRunner with a single canned report."""
    mock_runner = Mock()
    mock_runner.run.return_value = [
        {
            "drill_id": "mocked",
            "event": "process_completed",
            "mode": "sync",
            "rounds": 1,
            "invocations": 2,
            "mut_states": [],
            "config": {"subscribers_to_notify": "all", "clear_after_notification": "none"},
            "subscribers": {"registered": 2, "times_notified": 1},
            "subscribers_mut": {"registered": 0, "times_notified": 0},
            "fn_subscribers": {"registered": 0, "times_notified": 0},
        }
    ]
    monkeypatch.setattr("notifier.cli.DrillRunner", lambda drill_path: mock_runner)
    return mock_runner


pytestmark = pytest.mark.usefixtures("reset_root_logger")


# ---------------------------------------------------------------------
# Argument and file handling
# ---------------------------------------------------------------------

def test_main_returns_1_when_drill_not_found(capsys):
    result = main(["does_not_exist.yaml"])
    assert result == 1
    err = capsys.readouterr().err
    assert "Drill file not found" in err


def test_main_requires_drill_argument():
    with pytest.raises(SystemExit):
        main([])


def test_main_rejects_unknown_log_level_as_usage_error(tmp_path, capsys):
    drill = tmp_path / "drill.yaml"
    drill.write_text("events: {}")

    with pytest.raises(SystemExit) as exc_info:
        main([str(drill), "--log-level", "chatty"])

    assert exc_info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_main_accepts_upper_case_log_level(mock_drill_runner, tmp_path):
    drill = tmp_path / "drill.yaml"
    drill.write_text("id: test")

    assert main([str(drill), "--log-level", "DEBUG"]) == 0


# ---------------------------------------------------------------------
# Drill loading and running
# ---------------------------------------------------------------------

def test_main_returns_2_when_drill_load_fails(mock_drill_runner, tmp_path, capsys):
    drill = tmp_path / "drill.yaml"
    drill.write_text("id: test")

    mock_drill_runner.load.side_effect = ValueError("Load failed")

    result = main([str(drill)])
    assert result == 2
    assert "Failed to load drill: Load failed" in capsys.readouterr().err
    mock_drill_runner.run.assert_not_called()


def test_main_returns_3_when_drill_run_fails(mock_drill_runner, tmp_path, capsys):
    drill = tmp_path / "drill.yaml"
    drill.write_text("id: test")

    mock_drill_runner.run.side_effect = RuntimeError("subscriber exploded")

    result = main([str(drill)])
    assert result == 3
    assert "Drill failed: subscriber exploded" in capsys.readouterr().err


def test_main_prints_one_line_per_event(mock_drill_runner, tmp_path, capsys):
    drill = tmp_path / "drill.yaml"
    drill.write_text("id: test")

    result = main([str(drill)])
    assert result == 0

    out = capsys.readouterr().out
    assert "process_completed [sync]" in out
    assert "invocations=2" in out
    assert "subscribers=2/1" in out


# ---------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------

def test_main_writes_json_report(mock_drill_runner, tmp_path, capsys):
    drill = tmp_path / "drill.yaml"
    drill.write_text("id: test")
    json_file = tmp_path / "out" / "report.json"

    result = main([str(drill), "--output", "json", "--json-file", str(json_file)])
    assert result == 0

    data = json.loads(json_file.read_text(encoding="utf-8"))
    assert data[0]["event"] == "process_completed"
    assert "Drill report JSON dumped to" in capsys.readouterr().out


def test_main_returns_4_when_json_write_fails(mock_drill_runner, tmp_path, capsys):
    drill = tmp_path / "drill.yaml"
    drill.write_text("id: test")
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")

    result = main(
        [str(drill), "--output", "json", "--json-file", str(blocker / "report.json")]
    )
    assert result == 4
    assert "Failed to write JSON file" in capsys.readouterr().err


def test_format_report():
    line = format_report(
        {
            "event": "e",
            "mode": "async",
            "rounds": 3,
            "invocations": 9,
            "subscribers": {"registered": 3, "times_notified": 3},
            "subscribers_mut": {"registered": 0, "times_notified": 0},
            "fn_subscribers": {"registered": 0, "times_notified": 0},
        }
    )
    assert line == (
        "e [async] rounds=3 invocations=9 subscribers=3/3 "
        "subscribers_mut=0/0 fn_subscribers=0/0"
    )
