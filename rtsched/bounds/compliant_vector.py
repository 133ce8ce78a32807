"""Global EDF response-time bounds via compliant-vector analysis.

Follows Erickson, Devi & Baruah (ECRTS'10) and Erickson & Anderson (ECRTS'12)
with priority points ``Y_i = D_i``. Each task contributes a line
``y_i + U_i * s`` with intercept ``y_i = C_i - S_i - C_i * U_i / m`` where
``S_i = C_i * max(0, 1 - Y_i / T_i)``. The common slack ``s`` is the least
non-negative root of

    M(s) = G(s) + S - m * s

where ``G(s)`` sums the ``ceil(U) - 1`` largest line values at ``s`` and
``S = sum(S_i)``. ``M`` is piecewise linear, convex and strictly decreasing
whenever ``U <= m``, so the root is unique. The response-time bound of task
``i`` is ``Y_i + x_i + C_i`` with the compliant vector entry
``x_i = max(0, s - C_i / m)``.
"""

from __future__ import annotations

from fractions import Fraction
import heapq
import logging
from typing import Optional

from rtsched.model import TaskSystem, as_fraction

from .base import (
    BoundResult,
    BoundStatus,
    IBoundAlgorithm,
    SolverConfig,
    check_processors,
    unbounded_reason,
    utilization_ceiling,
)
from .devi_anderson import DeviAndersonBound


logger = logging.getLogger(__name__)


class _Lines:
    """Exact line parameters of the slack function for one task system."""

    def __init__(self, tasks: TaskSystem, processors: int) -> None:
        self.processors = processors
        self.count = max(0, utilization_ceiling(tasks) - 1)
        self.utilizations = [task.utilization() for task in tasks]
        self.slack = []
        self.intercepts = []
        for task, utilization in zip(tasks, self.utilizations):
            cost = as_fraction(task.cost)
            priority_point = as_fraction(task.deadline)
            s_i = max(Fraction(0), cost * (1 - priority_point / as_fraction(task.period)))
            self.slack.append(s_i)
            self.intercepts.append(cost - s_i - cost * utilization / processors)
        self.total_slack = sum(self.slack, Fraction(0))

        self._utilizations_f = [float(value) for value in self.utilizations]
        self._intercepts_f = [float(value) for value in self.intercepts]
        self._total_slack_f = float(self.total_slack)

    def top(self, s: Fraction) -> list[int]:
        """Indices of the lines counted by ``G`` just to the right of ``s``."""
        order = sorted(
            range(len(self.intercepts)),
            key=lambda i: (self.intercepts[i] + self.utilizations[i] * s, self.utilizations[i]),
            reverse=True,
        )
        return order[: self.count]

    def residual(self, s: Fraction) -> Fraction:
        values = [y + u * s for y, u in zip(self.intercepts, self.utilizations)]
        top = heapq.nlargest(self.count, values)
        return sum(top, Fraction(0)) + self.total_slack - self.processors * s

    def step(self, s: float) -> float:
        values = [y + u * s for y, u in zip(self._intercepts_f, self._utilizations_f)]
        top = heapq.nlargest(self.count, values)
        return max(0.0, (sum(top) + self._total_slack_f) / self.processors)

    def solve_piece(self, indices: list[int]) -> Fraction:
        """Root of ``M`` assuming the set of counted lines is ``indices``."""
        intercept = sum((self.intercepts[i] for i in indices), Fraction(0)) + self.total_slack
        slope = self.processors - sum((self.utilizations[i] for i in indices), Fraction(0))
        return intercept / slope

    def exact_root(self, approx: float, width: float) -> Optional[Fraction]:
        """Solve ``M(s) = 0`` exactly on the piece around ``approx``.

        Tries both sides of ``approx`` so a breakpoint within ``width`` of
        the root cannot select the wrong piece.
        """
        for point in (approx, approx + width, approx - width):
            if point < 0:
                continue
            candidate = self.solve_piece(self.top(Fraction(point)))
            if candidate < 0:
                if self.residual(Fraction(0)) <= 0:
                    return Fraction(0)
                continue
            if self.residual(candidate) == 0:
                return candidate
        return None


class CompliantVectorBound(IBoundAlgorithm):
    name = "compliant_vector"

    def __init__(self, clamp_to_devi_anderson: bool = True) -> None:
        self.clamp_to_devi_anderson = clamp_to_devi_anderson

    def response_times(
        self,
        tasks: TaskSystem,
        processors: int,
        config: Optional[SolverConfig] = None,
    ) -> BoundResult:
        config = config or SolverConfig()
        check_processors(processors)

        reason = unbounded_reason(tasks, processors)
        if reason is not None:
            return BoundResult.infeasible(self.name, processors, reason)

        lines = _Lines(tasks, processors)
        width = 16 * config.tolerance
        s = 0.0
        for iteration in range(1, config.max_iterations + 1):
            following = lines.step(s)
            converged = abs(following - s) <= config.tolerance
            s = following
            if not converged:
                continue
            root = lines.exact_root(s, width)
            if root is None:
                continue
            logger.debug("compliant_vector converged after %d iteration(s): s=%s", iteration, root)
            # Compliant vectors are non-negative: x_i = max(0, s - C_i / m).
            bounds = [
                as_fraction(task.deadline)
                + max(Fraction(0), root - as_fraction(task.cost) / processors)
                + as_fraction(task.cost)
                for task in tasks
            ]
            return BoundResult.bounded(
                self.name,
                processors,
                self._clamp(tasks, processors, config, bounds),
                iteration,
            )

        logger.debug("compliant_vector did not converge in %d iteration(s)", config.max_iterations)
        return BoundResult.inconclusive(self.name, processors, config.max_iterations)

    def _clamp(
        self,
        tasks: TaskSystem,
        processors: int,
        config: SolverConfig,
        bounds: list[Fraction],
    ) -> list[Fraction]:
        """Take the per-task minimum with the Devi-Anderson bound where it applies."""
        if not self.clamp_to_devi_anderson or not tasks.implicit_deadline():
            return bounds
        other = DeviAndersonBound().response_times(tasks, processors, config)
        if other.status is not BoundStatus.BOUNDED:
            return bounds
        return [min(mine, theirs) for mine, theirs in zip(bounds, other.exact)]
