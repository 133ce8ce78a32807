"""Release/priority policy interfaces and base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Callable, Optional

from rtsched.model import Job, JobTemplate, Task, as_fraction


class IReleasePolicy(ABC):
    """Decides when the next job of a task is released and how it is prioritized.

    A policy is consulted once per job, lazily, right after the previous job
    of the same task has been released. Lower priority values run first.
    """

    name = "custom"

    def init(self) -> None:
        """Hook called when a simulation run is built; resets per-run policy state."""

    @abstractmethod
    def release(self, task: Task, task_index: int, previous: Optional[Job]) -> JobTemplate:
        """Return the template of the job following ``previous`` (``None`` for the first job).

        The new job's sequence number is ``previous.index + 1`` (0 for the
        first job). Its release must be strictly later than ``previous.release``.
        """


ReleaseFunction = Callable[[Task, int, Optional[Job]], JobTemplate]


class FunctionReleasePolicy(IReleasePolicy):
    """Adapter for plain callables with the :meth:`IReleasePolicy.release` signature."""

    def __init__(self, func: ReleaseFunction, name: str | None = None) -> None:
        self._func = func
        self.name = name or getattr(func, "__name__", "function")

    def release(self, task: Task, task_index: int, previous: Optional[Job]) -> JobTemplate:
        return self._func(task, task_index, previous)


class PeriodicReleasePolicy(IReleasePolicy, ABC):
    """Releases as early as possible: at 0, then one period after the previous release."""

    def next_release(self, task: Task, task_index: int, previous: Optional[Job]) -> Fraction:  # noqa: ARG002
        if previous is None:
            return Fraction(0)
        return previous.release + as_fraction(task.period)

    @abstractmethod
    def priority_value(self, task_index: int, release: Fraction, deadline: Fraction) -> Fraction:
        """Return the job priority. Lower value = higher priority."""

    def release(self, task: Task, task_index: int, previous: Optional[Job]) -> JobTemplate:
        release = self.next_release(task, task_index, previous)
        deadline = release + as_fraction(task.deadline)
        return JobTemplate(
            release=release,
            deadline=deadline,
            cost=as_fraction(task.cost),
            priority=self.priority_value(task_index, release, deadline),
        )


def as_release_policy(policy: IReleasePolicy | ReleaseFunction) -> IReleasePolicy:
    if isinstance(policy, IReleasePolicy):
        return policy
    if callable(policy):
        return FunctionReleasePolicy(policy)
    raise TypeError(f"release policy must be IReleasePolicy or callable, got {type(policy).__name__}")
