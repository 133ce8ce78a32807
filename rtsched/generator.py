"""Random task-system generation for schedulability studies."""

from __future__ import annotations

from fractions import Fraction
import math
import random
from typing import Callable, Optional, Sequence

from rtsched.model import Task, TaskSystem, Time


Distribution = Callable[[random.Random], Time]


def uniform(minval: float, maxval: float) -> Distribution:
    """Floats drawn uniformly from ``[minval, maxval]``."""

    def _draw(rng: random.Random) -> float:
        return rng.uniform(minval, maxval)

    return _draw


def uniform_int(minval: int, maxval: int) -> Distribution:
    """Integers drawn uniformly from ``{minval, ..., maxval}``."""

    def _draw(rng: random.Random) -> int:
        return rng.randint(minval, maxval)

    return _draw


def uniform_choice(choices: Sequence[Time]) -> Distribution:
    def _draw(rng: random.Random) -> Time:
        return rng.choice(list(choices))

    return _draw


def exponential(minval: float, maxval: float, mean: float) -> Distribution:
    """Exponential draws with expected value ``mean``, redrawn until within bounds."""

    def _draw(rng: random.Random) -> float:
        while True:
            value = rng.expovariate(1.0 / mean)
            if minval <= value <= maxval:
                return value

    return _draw


def rand_task_system(
    total_utilization: Time,
    utilization_dist: Distribution,
    period_dist: Distribution,
    rng: Optional[random.Random] = None,
    *,
    max_tasks: Optional[int] = None,
    integral: bool = True,
) -> TaskSystem:
    """Draw implicit-deadline tasks until the next one would exceed ``total_utilization``.

    With ``integral`` set, periods and costs are truncated to integers (at
    least one); otherwise the drawn values are kept exactly.
    """
    rng = rng or random.Random()
    target = Fraction(total_utilization)
    if target <= 0:
        raise ValueError("total utilization must be > 0")

    tasks = TaskSystem([])
    used = Fraction(0)
    while max_tasks is None or len(tasks) < max_tasks:
        period = period_dist(rng)
        util = utilization_dist(rng)
        if period <= 0 or util <= 0:
            raise ValueError("period and utilization draws must be > 0")
        if integral:
            period = max(1, math.trunc(period))
            cost = max(1, math.trunc(period * util))
        else:
            period = Fraction(period)
            cost = period * Fraction(util)
        task = Task.implicit(period, cost)
        if used + task.utilization() > target:
            break
        tasks.append(task)
        used += task.utilization()
    return tasks
