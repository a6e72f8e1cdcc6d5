"""
Integration tests for DrillRunner and the CLI against real drill files.
"""
import json
from pathlib import Path

import pytest

from notifier.cli import main
from notifier.engine.drill_runner import DrillRunner
from notifier.engine.event import Event
from notifier.engine.event_async import EventAsync

EXAMPLE_DRILL = Path(__file__).resolve().parents[3] / "drills" / "process_lifecycle.yaml"

pytestmark = pytest.mark.usefixtures("reset_root_logger")


class TestExampleDrill:
    """The drill shipped with the repository."""

    def test_example_drill_runs(self):
        runner = DrillRunner(EXAMPLE_DRILL)
        runner.load()
        reports = {report["event"]: report for report in runner.run()}

        completed = reports["process_completed"]
        assert isinstance(runner.events["process_completed"], Event)
        assert completed["invocations"] == (2 + 1 + 1) * 3
        assert completed["mut_states"] == [3]
        assert completed["subscribers"] == {"registered": 2, "times_notified": 3}

        error = reports["process_error"]
        assert isinstance(runner.events["process_error"], EventAsync)
        # cleared after the first round, so the second round reaches nobody
        assert error["invocations"] == 8
        assert error["subscribers"] == {"registered": 0, "times_notified": 1}

    def test_cli_json_output(self, tmp_path):
        json_file = tmp_path / "report.json"

        result = main([str(EXAMPLE_DRILL), "--output", "json", "--json-file", str(json_file)])

        assert result == 0
        data = json.loads(json_file.read_text(encoding="utf-8"))
        assert [entry["event"] for entry in data] == ["process_completed", "process_error"]
        assert data[0]["drill_id"] == "process-lifecycle"


class TestDrillFailures:
    """CLI exit codes driven by real drill content."""

    def test_cli_reports_invalid_drill(self, drill_file, capsys):
        path = drill_file("events:\n  e:\n    mode: sideways\n")

        assert main([str(path)]) == 2
        assert "invalid mode" in capsys.readouterr().err

    def test_cli_debug_logging_goes_to_stderr(self, drill_file, capsys):
        path = drill_file("events:\n  e:\n    subscribers: 1\n")

        assert main([str(path), "--log-level", "debug"]) == 0

        captured = capsys.readouterr()
        assert "e [sync] rounds=1 invocations=1" in captured.out
        assert "Notifying 1 subscribers" in captured.err
