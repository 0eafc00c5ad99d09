"""Foreground collector: how long each app stays frontmost.

Logs one row per span when focus moves to another app, the screen locks,
the machine sleeps, or the collector stops. Each row carries the span start
as its timestamp and the span length in milliseconds.
"""

import logging

import screentally.config as config
from screentally.collectors.base import BaseCollector
from screentally.collectors.screen import _is_screen_locked

log = logging.getLogger(__name__)


def _get_frontmost_app() -> tuple[str, str] | None:
    """(app name, bundle id) of the active application, or None."""
    from AppKit import NSWorkspace
    active = NSWorkspace.sharedWorkspace().activeApplication()
    if not active:
        return None
    return (
        str(active.get("NSApplicationName", "") or ""),
        str(active.get("NSApplicationBundleIdentifier", "") or ""),
    )


class ForegroundCollector(BaseCollector):
    name = "foreground"
    interval = config.FOREGROUND_INTERVAL

    def __init__(self, buffer, db):
        super().__init__(buffer, db)
        self.app: tuple[str, str] | None = None
        self.since = 0.0

    def poll(self, now: float) -> None:
        app = None if _is_screen_locked() else _get_frontmost_app()
        if app is not None and app[1] in config.FOREGROUND_EXCLUDED:
            app = None
        if app == self.app:
            return
        self._end_span(now)
        if app is not None:
            self.app, self.since = app, now

    def on_wake(self, asleep_since: float) -> None:
        self._end_span(asleep_since)

    def finish(self, now: float, final: bool) -> None:
        # A span cut by a reload resumes as a new span; totals are unchanged
        self._end_span(now)

    def _end_span(self, end: float) -> None:
        if self.app is None:
            return
        app_name, bundle_id = self.app
        duration_ms = max(0, int((end - self.since) * 1000))
        self.buffer.add_span(self.since, app_name, bundle_id, duration_ms)
        log.debug("[%s] %s for %d ms", self.name, bundle_id or app_name, duration_ms)
        self.app = None
