"""Global earliest-deadline-first release policy."""

from __future__ import annotations

from fractions import Fraction

from .base import PeriodicReleasePolicy


class GEDFPolicy(PeriodicReleasePolicy):
    """Job priority is the job's absolute deadline."""

    name = "gedf"

    def priority_value(self, task_index: int, release: Fraction, deadline: Fraction) -> Fraction:  # noqa: ARG002
        return deadline
