"""Polling loop shared by the screen and foreground collectors."""

from __future__ import annotations

import abc
import logging
import threading
import time

import screentally.config as config
from screentally.buffer import RowBuffer
from screentally.db import Database

log = logging.getLogger(__name__)


class BaseCollector(abc.ABC):
    """Samples one piece of macOS state on its own thread.

    Each ``tick`` first checks how long it has been since the previous poll.
    A gap much longer than ``interval`` means the machine was asleep, and
    ``on_wake`` gets the time of the last poll before the gap so the
    subclass can close whatever was open then.

    Subclasses implement:
        name               : key for the collector's row in collector_state
        interval           : seconds between polls
        poll(now)          : look at the OS once and buffer rows for changes
        resume(now)        : restore state before the first poll
        on_wake(since)     : close open rows at the last poll before a sleep
        finish(now, final) : close open rows when the collector stops
    """

    name: str = ""
    interval: float = 2.0

    def __init__(self, buffer: RowBuffer, db: Database):
        self.buffer = buffer
        self.db = db
        self.last_poll: float | None = None
        self._thread: threading.Thread | None = None
        self._halt = threading.Event()

    @abc.abstractmethod
    def poll(self, now: float) -> None:
        """Look at the OS once."""

    def resume(self, now: float) -> None:
        pass

    def on_wake(self, asleep_since: float) -> None:
        pass

    def finish(self, now: float, final: bool) -> None:
        """``final`` is False when the daemon restarts collectors in place."""

    def tick(self, now: float | None = None) -> None:
        now = time.time() if now is None else now
        if self.last_poll is not None:
            gap = now - self.last_poll
            if gap > self.interval * config.SLEEP_GAP_FACTOR:
                log.info("[%s] no poll for %.1f min, assuming sleep", self.name, gap / 60)
                self.on_wake(self.last_poll)
        self.poll(now)
        self.last_poll = now

    # ── thread ──────────────────────────────────────────────────────────

    def start(self) -> None:
        self.resume(time.time())
        self._halt.clear()
        self._thread = threading.Thread(
            target=self._loop, name=f"collector-{self.name}", daemon=True
        )
        self._thread.start()
        log.info("[%s] polling every %.1fs", self.name, self.interval)

    def stop(self, final: bool = True) -> None:
        self._halt.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval + 2)
            if self._thread.is_alive():
                log.warning("[%s] poll still running, leaving open rows as they are", self.name)
                return
        self.finish(time.time(), final)
        log.info("[%s] stopped", self.name)

    @property
    def running(self) -> bool:
        return not self._halt.is_set()

    def _loop(self) -> None:
        while not self._halt.is_set():
            try:
                self.tick()
            except Exception:
                log.exception("[%s] poll failed", self.name)
            self._halt.wait(timeout=self.interval)
