"""Usage aggregator: turns one day's screen events and app usage into a report.

The permission check always happens before any usage data is touched. When
it fails the result is a `UsageDenied` value, not an exception.

Events must already be in timestamp order. They are not re-sorted or
validated here; malformed sequences produce best-effort numbers.
"""

from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Iterable, Sequence

import screentally.config as config
from screentally.events import AppUsageRecord, ScreenEvent, day_window
from screentally.reducers.base import BaseReducer
from screentally.reducers.peak_hour import PeakHourReducer
from screentally.reducers.session import SessionReducer
from screentally.reducers.top_apps import TopAppsReducer
from screentally.reducers.unlocks import UnlockReducer
from screentally.report import DailyUsageReport, UsageAvailable, UsageDenied
from screentally.sources.base import UsageSource

log = logging.getLogger(__name__)


def total_screen_time_seconds(records: Iterable[AppUsageRecord]) -> int:
    """Sum of whole seconds per record (truncated before summing)."""
    return sum(r.foreground_duration_ms // 1000 for r in records)


class UsageAggregator:
    """Runs the session, unlock, peak-hour and top-apps reducers over a day.

    With ``parallel=True`` each reducer runs on its own thread against its
    own snapshot of the input; results are only read after every thread
    has joined.
    """

    def __init__(self, parallel: bool | None = None):
        self.parallel = config.PARALLEL_REDUCERS if parallel is None else parallel

    def compute(
        self,
        has_permission: bool,
        events: Iterable[ScreenEvent],
        records: Iterable[AppUsageRecord],
    ) -> DailyUsageReport:
        if not has_permission:
            log.info("usage access not granted: skipping report")
            return UsageDenied()

        events = tuple(events)
        records = tuple(records)

        session = SessionReducer()
        unlocks = UnlockReducer()
        peak = PeakHourReducer()
        top = TopAppsReducer()
        jobs: list[tuple[BaseReducer, Sequence]] = [
            (session, events),
            (unlocks, events),
            (peak, events),
            (top, records),
        ]
        if self.parallel:
            self._run_threaded(jobs)
        else:
            for reducer, items in jobs:
                reducer.run(items)

        report = UsageAvailable(
            screen_time_seconds=total_screen_time_seconds(records),
            unlock_count=unlocks.result(),
            longest_session_seconds=session.result(),
            top_apps=top.result(),
            peak_usage_hour_label=peak.result(),
        )
        log.info(
            "report built from %d events and %d usage records (parallel=%s)",
            len(events), len(records), self.parallel,
        )
        return report

    @staticmethod
    def _run_threaded(jobs: list[tuple[BaseReducer, Sequence]]) -> None:
        errors: list[BaseException] = []

        def target(reducer: BaseReducer, items: Sequence) -> None:
            try:
                reducer.run(list(items))
            except Exception as e:
                log.exception("[%s] reducer failed", reducer.name)
                errors.append(e)

        threads = [
            threading.Thread(target=target, args=job, name=f"reducer-{job[0].name}")
            for job in jobs
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        if errors:
            raise errors[0]


def compute_daily_usage_report(
    has_permission: bool,
    events: Iterable[ScreenEvent],
    records: Iterable[AppUsageRecord],
    parallel: bool = False,
) -> DailyUsageReport:
    """Build the daily report from already-fetched inputs."""
    return UsageAggregator(parallel=parallel).compute(has_permission, events, records)


def report_from_source(
    source: UsageSource,
    day: date | None = None,
    now: datetime | None = None,
    parallel: bool = False,
) -> DailyUsageReport:
    """Check access on ``source`` and, only if granted, fetch and aggregate a day."""
    if not source.check_usage_permission():
        return UsageDenied()
    start_ms, end_ms = day_window(day, now)
    events = source.query_events(start_ms, end_ms)
    records = source.query_usage(start_ms, end_ms)
    return compute_daily_usage_report(True, events, records, parallel=parallel)
