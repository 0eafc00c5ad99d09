"""Screen collector: interactive / non-interactive transitions.

Polling-based approach:
- Lock state: CGSessionCopyCurrentDictionary() says whether the screen is locked
- Sleep: a poll gap much larger than the interval means the machine was asleep,
  so the screen went non-interactive at the last poll we saw

Only transitions are logged. The last logged state and the last time it was
confirmed live in collector_state, so a restart neither logs a second unlock
for a screen that never locked nor leaves a dead run's session open forever.
"""

import logging

import screentally.config as config
from screentally.collectors.base import BaseCollector
from screentally.events import EventType

log = logging.getLogger(__name__)


def _is_screen_locked() -> bool:
    """Check if the screen is currently locked via CGSession."""
    import Quartz
    session = Quartz.CGSessionCopyCurrentDictionary()
    if session is None:
        return False
    return bool(session.get("CGSSessionScreenIsLocked", False))


class ScreenCollector(BaseCollector):
    name = "screen"
    interval = config.SCREEN_INTERVAL

    def __init__(self, buffer, db):
        super().__init__(buffer, db)
        self.state: EventType | None = None
        self._confirmed_at = 0.0

    def resume(self, now: float) -> None:
        saved = self.db.load_state(self.name)
        if saved is None or saved[0] is None:
            return
        value, seen_at = saved
        try:
            state = EventType(value)
        except ValueError:
            log.warning("[%s] ignoring unknown saved state %r", self.name, value)
            return

        if state is EventType.INTERACTIVE and (seen_at is None or now - seen_at > config.STALE_STATE_AFTER):
            # The last run died with the screen on; end that session where it was last seen
            self._record(EventType.NON_INTERACTIVE, seen_at or now, "stale")
            return
        self.state = state
        self._confirmed_at = seen_at or 0.0

    def poll(self, now: float) -> None:
        state = EventType.NON_INTERACTIVE if _is_screen_locked() else EventType.INTERACTIVE
        if state is not self.state:
            self._record(state, now)
        elif now - self._confirmed_at >= config.STATE_CHECKPOINT_INTERVAL:
            self._confirm(now)

    def on_wake(self, asleep_since: float) -> None:
        if self.state is EventType.INTERACTIVE:
            self._record(EventType.NON_INTERACTIVE, asleep_since, "sleep")

    def finish(self, now: float, final: bool) -> None:
        if final and self.state is EventType.INTERACTIVE:
            self._record(EventType.NON_INTERACTIVE, now, "shutdown")
        elif self.state is not None:
            self._confirm(now)

    def _record(self, state: EventType, ts: float, details: str = "") -> None:
        self.buffer.add_screen(ts, state.value, details)
        self.state = state
        self._confirm(ts)
        log.info("[%s] %s%s", self.name, state.value, f" ({details})" if details else "")

    def _confirm(self, ts: float) -> None:
        self.db.save_state(self.name, self.state.value, ts)
        self._confirmed_at = ts
