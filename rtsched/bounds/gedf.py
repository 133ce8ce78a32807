"""Public entry points for global EDF bounds."""

from __future__ import annotations

from typing import Optional

from rtsched.model import TaskSystem

from .base import Algorithm, BoundResult, GEDFCompliantVector, IBoundAlgorithm, SolverConfig
from .registry import resolve_bound_algorithm


AlgorithmLike = str | Algorithm | IBoundAlgorithm


def bound(
    tasks: TaskSystem,
    processors: int,
    algorithm: AlgorithmLike = GEDFCompliantVector,
    config: Optional[SolverConfig] = None,
) -> BoundResult:
    """Response-time bounds of ``tasks`` under global EDF on ``processors`` CPUs."""
    return resolve_bound_algorithm(algorithm).response_times(tasks, processors, config)


def response_time_gedf(
    tasks: TaskSystem,
    processors: int,
    algorithm: AlgorithmLike = GEDFCompliantVector,
    config: Optional[SolverConfig] = None,
) -> BoundResult:
    return bound(tasks, processors, algorithm, config)


def tardiness_gedf(
    tasks: TaskSystem,
    processors: int,
    algorithm: AlgorithmLike = GEDFCompliantVector,
    config: Optional[SolverConfig] = None,
) -> BoundResult:
    """Tardiness bounds ``max(0, R_i - D_i)``, aligned with task order."""
    return bound(tasks, processors, algorithm, config).tardiness(tasks)
