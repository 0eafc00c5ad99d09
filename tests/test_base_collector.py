"""Tests for BaseCollector: sleep detection, polling thread, stop handling."""

import threading
import time

import pytest

from screentally.db import Database
from screentally.buffer import RowBuffer
from screentally.collectors.base import BaseCollector


class RecordingCollector(BaseCollector):
    name = "recording"
    interval = 0.05

    def __init__(self, buffer, db):
        super().__init__(buffer, db)
        self.polls = []
        self.wakes = []
        self.finished = []
        self.resumed = False

    def resume(self, now):
        self.resumed = True

    def poll(self, now):
        self.polls.append(now)

    def on_wake(self, asleep_since):
        self.wakes.append(asleep_since)

    def finish(self, now, final):
        self.finished.append(final)


class BrokenCollector(RecordingCollector):
    name = "broken"

    def poll(self, now):
        super().poll(now)
        raise RuntimeError("lock state unavailable")


class StuckCollector(RecordingCollector):
    name = "stuck"
    interval = 0.01

    def __init__(self, buffer, db):
        super().__init__(buffer, db)
        self.release = threading.Event()

    def poll(self, now):
        self.release.wait(timeout=5)


@pytest.fixture
def db(tmp_path):
    d = Database(path=tmp_path / "test.db")
    d.open()
    yield d
    d.close()


@pytest.fixture
def buf(db):
    return RowBuffer(db)


class TestTick:
    def test_normal_gap_is_not_sleep(self, buf, db):
        c = RecordingCollector(buf, db)
        c.tick(100.0)
        c.tick(100.2)
        assert c.polls == [100.0, 100.2]
        assert c.wakes == []
        assert c.last_poll == 100.2

    def test_long_gap_reports_last_poll(self, buf, db):
        c = RecordingCollector(buf, db)
        c.tick(100.0)
        c.tick(700.0)
        assert c.wakes == [100.0]
        assert c.polls == [100.0, 700.0]

    def test_first_tick_never_wakes(self, buf, db):
        c = RecordingCollector(buf, db)
        c.tick(5_000.0)
        assert c.wakes == []


class TestThread:
    def test_start_stop(self, buf, db):
        c = RecordingCollector(buf, db)
        c.start()
        assert c.resumed
        assert c.running
        time.sleep(0.2)
        c.stop()
        assert not c.running
        assert len(c.polls) >= 2
        assert c.finished == [True]

    def test_stop_for_restart(self, buf, db):
        c = RecordingCollector(buf, db)
        c.start()
        c.stop(final=False)
        assert c.finished == [False]

    def test_error_does_not_kill_thread(self, buf, db):
        c = BrokenCollector(buf, db)
        c.start()
        time.sleep(0.2)
        assert c._thread.is_alive()
        assert len(c.polls) >= 2
        c.stop()

    def test_stuck_poll_skips_finish(self, buf, db):
        c = StuckCollector(buf, db)
        c.start()
        time.sleep(0.05)
        c.interval = -1.9  # join gives up almost at once
        c.stop()
        assert c.finished == []
        c.release.set()

    def test_cannot_instantiate_abc(self, buf, db):
        with pytest.raises(TypeError):
            BaseCollector(buf, db)  # type: ignore[abstract]
