"""Unlock counter with jitter suppression."""

import screentally.config as config
from screentally.events import EventType, ScreenEvent
from screentally.reducers.base import BaseReducer


class UnlockReducer(BaseReducer):
    """Counts interactive events, dropping any within the debounce window of
    the last counted unlock."""

    name = "unlocks"

    def __init__(self, debounce_ms: int | None = None):
        self.debounce_ms = config.UNLOCK_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        super().__init__()

    def reset(self) -> None:
        self._count = 0
        self._last_unlock: int | None = None

    def feed(self, event: ScreenEvent) -> None:
        if event.event_type is not EventType.INTERACTIVE:
            return
        # No unlock yet today: the first one always counts
        if self._last_unlock is None or event.timestamp - self._last_unlock > self.debounce_ms:
            self._count += 1
            self._last_unlock = event.timestamp

    def result(self) -> int:
        return self._count
