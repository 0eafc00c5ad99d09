"""screentally CLI: run the collector and print daily reports."""

import argparse
import json
import sys
import time
from datetime import datetime
from pathlib import Path

from screentally.aggregator import report_from_source
from screentally.config import DATA_DIR, DB_PATH, LOG_PATH, PARALLEL_REDUCERS, STALE_STATE_AFTER
from screentally.daemon import Daemon
from screentally.db import Database
from screentally.events import sanitize_events
from screentally.report import format_report
from screentally.sources.database import DatabaseUsageSource


# ── Subcommands ──────────────────────────────────────────────────────────


def cmd_run(args: argparse.Namespace) -> None:
    Daemon().run()


def cmd_status(args: argparse.Namespace) -> int:
    path = Path(args.db) if args.db else DB_PATH
    print("\n  screentally status")
    print("  ──────────────────\n")
    if not path.is_file():
        print(f"  Database     not created yet ({path})\n")
        return 1

    with Database(path, readonly=True) as db:
        screens = db.count("screen_events")
        spans = db.count("foreground_events")
        states = db.collector_states()

    print(f"  Database     {path} ({path.stat().st_size / (1024 * 1024):.1f} MB)")
    print(f"  Rows         {screens:,} screen, {spans:,} foreground")
    now = time.time()
    for name, watermark, seen_at in states:
        if seen_at is None:
            continue
        age = now - seen_at
        live = "collecting" if age <= STALE_STATE_AFTER else "idle"
        print(f"  {name:<12} {watermark}, last seen {age:,.0f}s ago ({live})")
    print()
    return 0


def cmd_logs(args: argparse.Namespace) -> None:
    if not LOG_PATH.exists():
        print(f"No log files found at {DATA_DIR}")
        return
    for line in LOG_PATH.read_text().splitlines()[-args.lines:]:
        print(line)


class _SanitizingSource(DatabaseUsageSource):
    """Database source that cleans up event order before aggregation."""

    def query_events(self, start_ms, end_ms):
        return sanitize_events(super().query_events(start_ms, end_ms))


def cmd_report(args: argparse.Namespace) -> int:
    if args.date:
        try:
            day = datetime.strptime(args.date, "%Y-%m-%d").date()
        except ValueError:
            print(f"invalid --date {args.date!r}, expected YYYY-MM-DD", file=sys.stderr)
            return 2
    else:
        day = None

    path = Path(args.db) if args.db else DB_PATH
    source_cls = _SanitizingSource if args.sanitize else DatabaseUsageSource
    report = report_from_source(source_cls(path), day=day, parallel=args.parallel)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        label = (day or datetime.now().date()).strftime("%A, %B %d %Y")
        print(format_report(report, label))
    return 0 if report.has_permission else 1


# ── Main ─────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="screentally",
        description="daily screen time, unlocks, and top apps for macOS",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("run", help="collect screen and app activity until stopped")

    p_status = sub.add_parser("status", help="show what has been collected so far")
    p_status.add_argument("--db", help="database path (default: %s)" % DB_PATH)

    p_logs = sub.add_parser("logs", help="show recent log output")
    p_logs.add_argument("-n", "--lines", type=int, default=30,
                        help="number of lines to show (default: 30)")

    p_report = sub.add_parser("report", help="print the usage report for a day")
    p_report.add_argument("--date", help="day to report on, YYYY-MM-DD (default: today)")
    p_report.add_argument("--json", action="store_true", help="print the flat JSON mapping")
    p_report.add_argument("--sanitize", action="store_true",
                          help="sort events and drop repeated transitions first")
    p_report.add_argument("--parallel", action="store_true", default=PARALLEL_REDUCERS,
                          help="run the reducers on separate threads")
    p_report.add_argument("--db", help="database path (default: %s)" % DB_PATH)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "run": cmd_run,
        "status": cmd_status,
        "logs": cmd_logs,
        "report": cmd_report,
    }

    if args.command not in commands:
        parser.print_help()
        return 0
    return commands[args.command](args) or 0


if __name__ == "__main__":
    sys.exit(main())
