"""Simulation engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from rtsched.events import SimEvent
from rtsched.model import Schedule, TaskSystem, Time


class ISimEngine(ABC):
    """Simulation engine contract."""

    @abstractmethod
    def build(self, tasks: TaskSystem, processors: int, horizon: Time) -> None:
        """Validate arguments and create a fresh simulation context."""

    @abstractmethod
    def run(self, until: Time | None = None) -> None:
        """Run simulation until horizon."""

    @abstractmethod
    def step(self) -> None:
        """Advance to the next event boundary."""

    @abstractmethod
    def pause(self) -> None:
        """Pause simulation loop."""

    @abstractmethod
    def resume(self) -> None:
        """Resume a paused simulation loop."""

    @abstractmethod
    def stop(self) -> None:
        """Stop simulation loop permanently."""

    @abstractmethod
    def reset(self) -> None:
        """Reset engine state."""

    @abstractmethod
    def schedule(self) -> Schedule:
        """Return the simulated trace."""

    @abstractmethod
    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        """Subscribe event handler."""
