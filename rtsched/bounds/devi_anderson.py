"""Global EDF response-time bounds after Devi & Anderson (RTSJ 2008).

Every task shares a common lag ``x``. With ``Lambda = ceil(U) - 1``,
``E`` the sum of the ``Lambda`` largest costs, ``e_min`` the smallest cost
and ``U'`` the sum of the ``Lambda - 1`` largest utilizations,

    x = (max(0, E - e_min) + U' * x) / m

and the response time of task ``i`` is bounded by ``D_i + C_i + x``.
"""

from __future__ import annotations

from fractions import Fraction
import logging
from typing import Optional

from rtsched.model import TaskSystem, as_fraction

from .base import (
    BoundResult,
    IBoundAlgorithm,
    SolverConfig,
    check_processors,
    unbounded_reason,
    utilization_ceiling,
)


logger = logging.getLogger(__name__)


def lag_parameters(tasks: TaskSystem) -> tuple[Fraction, Fraction]:
    """Return ``(max(0, E - e_min), U')`` for the lag recurrence."""
    costs = sorted((as_fraction(task.cost) for task in tasks), reverse=True)
    utilizations = sorted((task.utilization() for task in tasks), reverse=True)
    if not costs:
        return Fraction(0), Fraction(0)

    lam = utilization_ceiling(tasks) - 1
    e_min = costs[-1]
    reduced_cost = max(Fraction(0), sum(costs[:lam], Fraction(0)) - e_min)
    carried = sum(utilizations[: max(0, lam - 1)], Fraction(0))
    return reduced_cost, carried


class DeviAndersonBound(IBoundAlgorithm):
    name = "devi_anderson"

    def response_times(
        self,
        tasks: TaskSystem,
        processors: int,
        config: Optional[SolverConfig] = None,
    ) -> BoundResult:
        config = config or SolverConfig()
        check_processors(processors)
        if not tasks.implicit_deadline():
            raise ValueError("Devi-Anderson analysis requires implicit deadlines")

        reason = unbounded_reason(tasks, processors)
        if reason is not None:
            return BoundResult.infeasible(self.name, processors, reason)

        reduced_cost, carried = lag_parameters(tasks)
        base = [as_fraction(task.deadline) + as_fraction(task.cost) for task in tasks]
        cost_f, carried_f = float(reduced_cost), float(carried)

        # Every bound is base_i + lag, so the lag alone decides convergence.
        lag = 0.0
        for iteration in range(1, config.max_iterations + 1):
            following = (cost_f + carried_f * lag) / processors
            converged = abs(following - lag) <= config.tolerance
            lag = following
            if converged:
                exact_lag = reduced_cost / (processors - carried)
                logger.debug(
                    "devi_anderson converged after %d iteration(s): lag=%s",
                    iteration,
                    exact_lag,
                )
                return BoundResult.bounded(
                    self.name,
                    processors,
                    [value + exact_lag for value in base],
                    iteration,
                )

        logger.debug("devi_anderson did not converge in %d iteration(s)", config.max_iterations)
        return BoundResult.inconclusive(self.name, processors, config.max_iterations)
