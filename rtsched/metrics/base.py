"""Trace consumer interface for schedule metrics."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from rtsched.events import SimEvent


class IMetric(ABC):
    """Folds a trace, event by event, into a JSON-ready report.

    The engine calls :meth:`reset` when a run is built and :meth:`consume`
    for every published event. Reports of several metrics are merged with
    ``dict.update``, so keys should not collide.
    """

    @abstractmethod
    def consume(self, event: SimEvent) -> None:
        """Fold one event into the running aggregate."""

    @abstractmethod
    def report(self) -> dict:
        """Return the aggregate so far."""

    @abstractmethod
    def reset(self) -> None:
        """Drop everything consumed so far."""

    def replay(self, events: Iterable[SimEvent]) -> dict:
        """Recompute the report from a stored trace, e.g. one read back from JSON lines."""
        self.reset()
        for event in events:
            self.consume(event)
        return self.report()
