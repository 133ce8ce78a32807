"""Run the simulator and the bound solvers on a loaded study spec."""

from __future__ import annotations

from typing import Any, Optional

from rtsched.bounds import BoundResult, SolverConfig, create_bound_algorithm
from rtsched.core import SimEngine
from rtsched.model import ModelSpec
from rtsched.schedulers import create_release_policy


def build_engine(
    spec: ModelSpec,
    *,
    scheduler: Optional[str] = None,
    processors: Optional[int] = None,
    horizon: Optional[float] = None,
) -> SimEngine:
    """Create and build an engine for ``spec`` with optional overrides."""
    name = scheduler or spec.scheduler.name
    params: dict[str, Any] = dict(spec.scheduler.params) if name == spec.scheduler.name else {}
    params.setdefault("seed", spec.sim.seed)
    engine = SimEngine(
        create_release_policy(name, params),
        event_id_mode=spec.sim.event_id_mode,
        event_id_seed=spec.sim.seed,
    )
    engine.build(
        spec.tasks,
        processors if processors is not None else spec.platform.processors,
        horizon if horizon is not None else spec.sim.horizon,
    )
    return engine


def run_simulation(spec: ModelSpec, **overrides: Any) -> SimEngine:
    engine = build_engine(spec, **overrides)
    engine.run()
    return engine


def run_bounds(
    spec: ModelSpec,
    *,
    algorithms: Optional[list[str]] = None,
    processors: Optional[int] = None,
    tardiness: bool = False,
) -> dict[str, BoundResult]:
    """Evaluate each configured bound algorithm, keyed by algorithm name."""
    config = SolverConfig(
        tolerance=spec.analysis.tolerance,
        max_iterations=spec.analysis.max_iterations,
    )
    cpus = processors if processors is not None else spec.platform.processors
    results: dict[str, BoundResult] = {}
    for name in algorithms or spec.analysis.algorithms:
        solver = create_bound_algorithm(name)
        result = solver.response_times(spec.tasks, cpus, config)
        results[solver.name] = result.tardiness(spec.tasks) if tardiness else result
    return results
