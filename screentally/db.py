"""SQLite store for screen transitions, app spans and collector state.

The daemon is the only writer. Reports open the same file read-only while
the daemon keeps writing, which is why the journal is WAL and every statement
on a connection goes through the instance lock.
"""

import logging
import sqlite3
import threading
from pathlib import Path

from screentally.config import DB_PATH

log = logging.getLogger(__name__)

_TABLES = ("screen_events", "foreground_events", "collector_state")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS screen_events (
    id INTEGER PRIMARY KEY,
    timestamp REAL NOT NULL,
    event_type TEXT NOT NULL,
    details TEXT
);
CREATE INDEX IF NOT EXISTS idx_screen_ts ON screen_events(timestamp);

CREATE TABLE IF NOT EXISTS foreground_events (
    id INTEGER PRIMARY KEY,
    timestamp REAL NOT NULL,
    app_name TEXT,
    bundle_id TEXT,
    duration_ms INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_foreground_ts ON foreground_events(timestamp);

CREATE TABLE IF NOT EXISTS collector_state (
    collector_name TEXT PRIMARY KEY,
    last_watermark TEXT,
    last_run_timestamp REAL
);
"""

# (timestamp, event_type, details)
ScreenRow = tuple[float, str, str]
# (span start, app_name, bundle_id, duration_ms)
SpanRow = tuple[float, str, str, int]


class Database:
    """Locked SQLite connection shared by the collectors and the daemon.

    Usage:
        with Database() as db:
            db.add_screen_events([(ts, "interactive", "")])

    ``readonly=True`` opens an existing file for reporting. It never creates
    the file and never touches the schema.
    """

    def __init__(self, path: Path | None = None, readonly: bool = False):
        self.path = path or DB_PATH
        self.readonly = readonly
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self) -> None:
        if self.readonly:
            self._conn = sqlite3.connect(
                f"file:{self.path}?mode=ro", uri=True,
                check_same_thread=False, timeout=10.0,
            )
            log.debug("opened %s read-only", self.path)
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.path), check_same_thread=False, timeout=10.0)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.executescript(_SCHEMA)
        conn.commit()
        self._conn = conn
        log.info("database ready at %s", self.path)

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            except sqlite3.Error:
                log.exception("error closing %s", self.path)
            finally:
                self._conn = None

    def _ensure_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("database is not open: call .open() first")
        return self._conn

    # ── collected rows ──────────────────────────────────────────────────

    def add_screen_events(self, rows: list[ScreenRow]) -> None:
        self._insert(
            "INSERT INTO screen_events (timestamp, event_type, details) VALUES (?, ?, ?)",
            rows,
        )

    def add_foreground_spans(self, rows: list[SpanRow]) -> None:
        self._insert(
            "INSERT INTO foreground_events (timestamp, app_name, bundle_id, duration_ms) "
            "VALUES (?, ?, ?, ?)",
            rows,
        )

    def _insert(self, sql: str, rows: list[tuple]) -> None:
        if not rows:
            return
        conn = self._ensure_conn()
        with self._lock, conn:
            conn.executemany(sql, rows)

    # ── collector state ─────────────────────────────────────────────────

    def load_state(self, collector_name: str) -> tuple[str | None, float | None] | None:
        """(last watermark, when it was last confirmed), or None if never saved."""
        conn = self._ensure_conn()
        with self._lock:
            row = conn.execute(
                "SELECT last_watermark, last_run_timestamp FROM collector_state "
                "WHERE collector_name = ?",
                (collector_name,),
            ).fetchone()
        return tuple(row) if row else None

    def save_state(self, collector_name: str, watermark: str, seen_at: float) -> None:
        conn = self._ensure_conn()
        with self._lock, conn:
            conn.execute(
                "INSERT INTO collector_state (collector_name, last_watermark, last_run_timestamp) "
                "VALUES (?, ?, ?) "
                "ON CONFLICT(collector_name) DO UPDATE SET "
                "last_watermark = excluded.last_watermark, "
                "last_run_timestamp = excluded.last_run_timestamp",
                (collector_name, watermark, seen_at),
            )

    # ── reads ───────────────────────────────────────────────────────────

    def count(self, table: str) -> int:
        if table not in _TABLES:
            raise ValueError(f"unknown table: {table!r}")
        conn = self._ensure_conn()
        with self._lock:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def screen_events_between(self, start: float, end: float) -> list[tuple[float, str]]:
        """(timestamp, event_type) rows with start <= timestamp < end, oldest first."""
        conn = self._ensure_conn()
        with self._lock:
            return conn.execute(
                "SELECT timestamp, event_type FROM screen_events "
                "WHERE timestamp >= ? AND timestamp < ? ORDER BY timestamp, id",
                (start, end),
            ).fetchall()

    def foreground_totals_between(self, start: float, end: float) -> list[tuple[str, int]]:
        """(bundle_id, total duration_ms) per app whose spans started in the range.

        Apps without a bundle id fall back to their name. Apps are listed in
        order of first use.
        """
        conn = self._ensure_conn()
        with self._lock:
            rows = conn.execute(
                "SELECT COALESCE(NULLIF(bundle_id, ''), app_name) AS app, SUM(duration_ms) "
                "FROM foreground_events "
                "WHERE timestamp >= ? AND timestamp < ? "
                "GROUP BY app ORDER BY MIN(timestamp), app",
                (start, end),
            ).fetchall()
        return [(app, int(total)) for app, total in rows]

    def collector_states(self) -> list[tuple[str, str | None, float | None]]:
        """Every saved collector state, for ``screentally status``."""
        conn = self._ensure_conn()
        with self._lock:
            return conn.execute(
                "SELECT collector_name, last_watermark, last_run_timestamp "
                "FROM collector_state ORDER BY collector_name"
            ).fetchall()
