"""Sporadic release policies: periodic releases delayed by a seeded random amount."""

from __future__ import annotations

from fractions import Fraction
from random import Random
from typing import Any, Optional

from rtsched.model import Job, Task, as_fraction

from .base import PeriodicReleasePolicy
from .gedf import GEDFPolicy
from .gfp import GFPPolicy


class SporadicMixin(PeriodicReleasePolicy):
    """Adds ``rng.uniform(0, max_delay)`` on top of the earliest periodic release.

    Inter-release separation stays at least one period, so periodic spacing
    still holds.
    """

    def __init__(self, params: dict[str, Any] | None = None) -> None:
        params = params or {}
        max_delay_raw = params.get("max_delay", 0)
        if not isinstance(max_delay_raw, (int, float)) or isinstance(max_delay_raw, bool):
            raise ValueError("sporadic release policy requires numeric params.max_delay")
        if max_delay_raw < 0:
            raise ValueError("sporadic release policy requires params.max_delay >= 0")
        seed_raw = params.get("seed", 0)
        if not isinstance(seed_raw, int):
            raise ValueError("sporadic release policy requires integer params.seed")
        self._max_delay = float(max_delay_raw)
        self._seed = seed_raw
        self._rng = Random(self._seed)

    def init(self) -> None:
        self._rng = Random(self._seed)

    def next_release(self, task: Task, task_index: int, previous: Optional[Job]) -> Fraction:
        earliest = super().next_release(task, task_index, previous)
        if self._max_delay <= 0:
            return earliest
        return earliest + as_fraction(self._rng.uniform(0.0, self._max_delay))


class SporadicGEDFPolicy(SporadicMixin, GEDFPolicy):
    name = "sporadic_gedf"


class SporadicGFPPolicy(SporadicMixin, GFPPolicy):
    name = "sporadic_gfp"
