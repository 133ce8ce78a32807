"""Global fixed-priority release policy."""

from __future__ import annotations

from fractions import Fraction

from .base import PeriodicReleasePolicy


class GFPPolicy(PeriodicReleasePolicy):
    """Every job inherits its task's index as priority; index 0 runs first."""

    name = "gfp"

    def priority_value(self, task_index: int, release: Fraction, deadline: Fraction) -> Fraction:  # noqa: ARG002
        return Fraction(task_index)
