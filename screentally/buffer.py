"""Rows waiting between the collector threads and SQLite.

Collectors poll every couple of seconds. Writing each transition or span as
it happens would keep the database busy, so rows sit here until the daemon's
flush loop (or a full buffer) writes them out in one transaction per table.
"""

import logging
import threading

import screentally.config as config
from screentally.db import Database, ScreenRow, SpanRow

log = logging.getLogger(__name__)


class RowBuffer:
    def __init__(self, db: Database):
        self._db = db
        self._lock = threading.Lock()
        self._screen: list[ScreenRow] = []
        self._spans: list[SpanRow] = []

    def add_screen(self, ts: float, event_type: str, details: str = "") -> None:
        with self._lock:
            self._screen.append((ts, event_type, details))
            self._maybe_write()

    def add_span(self, start: float, app_name: str, bundle_id: str, duration_ms: int) -> None:
        with self._lock:
            self._spans.append((start, app_name, bundle_id, duration_ms))
            self._maybe_write()

    def flush(self) -> int:
        """Write everything held so far; returns how many rows were stored."""
        with self._lock:
            return self._write()

    def _maybe_write(self) -> None:
        if len(self._screen) + len(self._spans) >= config.BUFFER_MAX_SIZE:
            self._write()

    def _write(self) -> int:
        # Caller holds self._lock. A failed batch is dropped, not retried.
        screen, self._screen = self._screen, []
        spans, self._spans = self._spans, []

        stored = 0
        for kind, write, rows in (
            ("screen", self._db.add_screen_events, screen),
            ("foreground", self._db.add_foreground_spans, spans),
        ):
            if not rows:
                continue
            try:
                write(rows)
            except Exception:
                log.exception("lost %d %s rows", len(rows), kind)
                continue
            stored += len(rows)

        if stored:
            log.debug("stored %d rows", stored)
        return stored
