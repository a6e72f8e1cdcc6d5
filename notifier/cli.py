# notifier/cli.py

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, List

from notifier.engine.drill_runner import DrillRunner
from notifier.logging_setup import parse_log_level, setup_logging

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def format_report(report: dict[str, Any]) -> str:
    """One human-readable line per event report."""
    return (
        f"{report['event']} [{report['mode']}] rounds={report['rounds']} "
        f"invocations={report['invocations']} "
        f"subscribers={report['subscribers']['registered']}/"
        f"{report['subscribers']['times_notified']} "
        f"subscribers_mut={report['subscribers_mut']['registered']}/"
        f"{report['subscribers_mut']['times_notified']} "
        f"fn_subscribers={report['fn_subscribers']['registered']}/"
        f"{report['fn_subscribers']['times_notified']}"
    )


def main(argv: list[str] | None = None) -> int | None:
    parser = argparse.ArgumentParser(
        prog="notifier.cli",
        description="Run a notification drill against Event / EventAsync",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "drill",
        type=Path,
        help="Path to the drill YAML file",
    )
    parser.add_argument(
        "--output",
        choices=["cli", "json"],
        default="cli",
        help="Output mode: 'cli' prints one line per event; 'json' dumps the reports to a JSON file",
    )
    parser.add_argument(
        "--json-file",
        type=Path,
        default=Path("drill_report.json"),
        help="Path to JSON output file if --output=json",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default="warning",
        help="Logging level",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional file to write logs to",
    )

    args = parser.parse_args(argv)

    setup_logging(log_level=parse_log_level(args.log_level), log_file=args.log_file)

    if not args.drill.exists():
        print(f"Drill file not found: {args.drill}", file=sys.stderr)
        return 1

    runner = DrillRunner(drill_path=args.drill)

    try:
        runner.load()
    except Exception as exc:
        print(f"Failed to load drill: {exc}", file=sys.stderr)
        return 2

    try:
        reports: List[dict[str, Any]] = runner.run()
    except Exception as exc:
        print(f"Drill failed: {exc}", file=sys.stderr)
        return 3

    if args.output == "cli":
        for report in reports:
            print(format_report(report))
        return 0

    try:
        args.json_file.parent.mkdir(parents=True, exist_ok=True)
        with args.json_file.open("w", encoding="utf-8") as f:
            json.dump(reports, f, indent=2)
        print(f"Drill report JSON dumped to {args.json_file}")
    except Exception as exc:
        print(f"Failed to write JSON file: {exc}", file=sys.stderr)
        return 4

    return 0  # success


if __name__ == "__main__":
    sys.exit(main())
