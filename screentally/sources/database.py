"""Usage source backed by the daemon's SQLite database."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from screentally.config import DB_PATH
from screentally.db import Database
from screentally.events import AppUsageRecord, EventType, ScreenEvent, to_ms
from screentally.sources.base import UsageSource

log = logging.getLogger(__name__)


class DatabaseUsageSource(UsageSource):
    """Reads screen and foreground events collected by the daemon.

    Access is granted only when the database file already exists and is
    readable; the file is never created from here.
    """

    def __init__(self, path: Path | None = None):
        self.path = path or DB_PATH

    def check_usage_permission(self) -> bool:
        granted = self.path.is_file() and os.access(self.path, os.R_OK)
        if not granted:
            log.warning("usage database not readable at %s", self.path)
        return granted

    def query_events(self, start_ms: int, end_ms: int) -> list[ScreenEvent]:
        with Database(self.path, readonly=True) as db:
            rows = db.screen_events_between(start_ms / 1000, end_ms / 1000)
        events = []
        for ts, event_type in rows:
            try:
                kind = EventType(event_type)
            except ValueError:
                log.warning("skipping unknown screen event type %r", event_type)
                continue
            events.append(ScreenEvent(kind, to_ms(ts)))
        return events

    def query_usage(self, start_ms: int, end_ms: int) -> list[AppUsageRecord]:
        with Database(self.path, readonly=True) as db:
            rows = db.foreground_totals_between(start_ms / 1000, end_ms / 1000)
        return [AppUsageRecord(app, total_ms) for app, total_ms in rows]
