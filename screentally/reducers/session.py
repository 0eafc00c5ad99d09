"""Longest continuous interactive session.

An interactive event opens a session (replacing any session already open),
a non-interactive event closes it. A session still open at the end of the
input is not counted.
"""

from screentally.events import EventType, ScreenEvent
from screentally.reducers.base import BaseReducer


class SessionReducer(BaseReducer):
    name = "session"

    def reset(self) -> None:
        self._session_start = 0
        self._screen_on = False
        self._longest_ms = 0

    def feed(self, event: ScreenEvent) -> None:
        if event.event_type is EventType.INTERACTIVE:
            self._session_start = event.timestamp
            self._screen_on = True
        elif event.event_type is EventType.NON_INTERACTIVE and self._screen_on:
            self._longest_ms = max(self._longest_ms, event.timestamp - self._session_start)
            self._screen_on = False

    def result(self) -> int:
        """Longest session in whole seconds."""
        return self._longest_ms // 1000
