"""Base reducer ABC: every daily statistic inherits from this."""

from __future__ import annotations

import abc
import logging
from typing import Any, Iterable

log = logging.getLogger(__name__)


class BaseReducer(abc.ABC):
    """Abstract base for single-pass reducers over a day's input.

    Subclasses must implement:
        name     : unique string identifier
        reset()  : (re)initialise all internal state
        feed()   : consume one item
        result() : the statistic for everything fed so far

    Each instance owns its state outright, so separate instances can run
    on separate threads over the same read-only input.
    """

    name: str = ""

    def __init__(self):
        self.reset()

    @abc.abstractmethod
    def reset(self) -> None:
        """Clear accumulated state."""

    @abc.abstractmethod
    def feed(self, item: Any) -> None:
        """Consume one item."""

    @abc.abstractmethod
    def result(self) -> Any:
        """Return the reduced value."""

    def run(self, items: Iterable[Any]) -> Any:
        """Reset, feed every item in order, and return the result."""
        self.reset()
        count = 0
        for item in items:
            self.feed(item)
            count += 1
        value = self.result()
        log.debug("[%s] reduced %d items -> %r", self.name, count, value)
        return value
