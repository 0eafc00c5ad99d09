"""screentally daemon: runs the collectors and flushes their rows to SQLite.

SIGTERM/SIGINT stop it and close any open session. SIGHUP restarts the
collectors in place without ending the session that is open.
"""

import logging
import os
import signal
import sys
import time

from screentally.config import DATA_DIR, LOG_PATH, BUFFER_FLUSH_INTERVAL
from screentally.db import Database
from screentally.buffer import RowBuffer
from screentally.collectors.base import BaseCollector
from screentally.collectors.screen import ScreenCollector
from screentally.collectors.foreground import ForegroundCollector

log = logging.getLogger("screentally")

ALL_COLLECTORS = [
    ScreenCollector,
    ForegroundCollector,
]


def _setup_logging() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(LOG_PATH)),
            logging.StreamHandler(sys.stderr),
        ],
    )


class Daemon:
    def __init__(self, db: Database | None = None):
        self.db = db or Database()
        self.buffer: RowBuffer | None = None
        self.collectors: list[BaseCollector] = []
        self._running = False

    def run(self) -> None:
        """Block until a signal stops the daemon."""
        _setup_logging()
        log.info("screentally daemon starting (pid=%d)", os.getpid())
        self.open()
        self._running = True
        for signum in (signal.SIGTERM, signal.SIGINT):
            signal.signal(signum, self._handle_stop)
        signal.signal(signal.SIGHUP, lambda signum, frame: self.reload())

        while self._running:
            time.sleep(BUFFER_FLUSH_INTERVAL)
            self.buffer.flush()

    def open(self) -> None:
        self.db.open()
        self.buffer = RowBuffer(self.db)
        self._start_collectors()

    def stop(self) -> None:
        self._running = False
        self._stop_collectors(final=True)
        if self.buffer:
            stored = self.buffer.flush()
            log.info("stored %d rows on shutdown", stored)
        self.db.close()
        log.info("screentally daemon stopped")

    def reload(self) -> None:
        """Restart every collector; open sessions carry over to the new ones."""
        self._stop_collectors(final=False)
        self.buffer.flush()
        self._start_collectors()
        log.info("collectors restarted: %s", ", ".join(c.name for c in self.collectors))

    def _start_collectors(self) -> None:
        self.collectors = [cls(self.buffer, self.db) for cls in ALL_COLLECTORS]
        for collector in self.collectors:
            collector.start()

    def _stop_collectors(self, final: bool) -> None:
        while self.collectors:
            self.collectors.pop().stop(final=final)

    def _handle_stop(self, signum, frame) -> None:
        log.info("received signal %d", signum)
        self.stop()
        sys.exit(0)


def main() -> None:
    Daemon().run()


if __name__ == "__main__":
    main()
