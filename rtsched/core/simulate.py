"""One-shot simulation entry points."""

from __future__ import annotations

from rtsched.model import Schedule, TaskSystem, Time
from rtsched.schedulers import GEDFPolicy, GFPPolicy, IReleasePolicy, ReleaseFunction

from .engine import SimEngine


def simulate_global(
    release_policy: IReleasePolicy | ReleaseFunction,
    tasks: TaskSystem,
    processors: int,
    horizon: Time,
) -> Schedule:
    """Simulate ``tasks`` on ``processors`` identical processors over ``[0, horizon)``.

    At every instant the (up to) ``processors`` highest-priority pending jobs
    run; a job never runs on two processors at once but may move between them
    after being preempted.
    """
    engine = SimEngine(release_policy)
    engine.build(tasks, processors, horizon)
    engine.run()
    return engine.schedule()


def simulate_gedf(tasks: TaskSystem, processors: int, horizon: Time) -> Schedule:
    """Global EDF with periodic releases."""
    return simulate_global(GEDFPolicy(), tasks, processors, horizon)


def simulate_gfp(tasks: TaskSystem, processors: int, horizon: Time) -> Schedule:
    """Global fixed priority in task-system order with periodic releases."""
    return simulate_global(GFPPolicy(), tasks, processors, horizon)
