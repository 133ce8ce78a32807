"""Runtime types shared across the simulation engine and release policies."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Optional

from .jobs import ExecInterval, Job
from .tasks import Task


@dataclass(slots=True)
class JobRuntime:
    """Engine-internal mutable state for one released job."""

    task: Task
    task_index: int
    index: int
    release: Fraction
    deadline: Fraction
    cost: Fraction
    priority: Fraction
    remaining: Fraction
    intervals: list[ExecInterval] = field(default_factory=list)
    running_on: Optional[int] = None
    running_since: Optional[Fraction] = None
    last_processor: Optional[int] = None
    completion: Optional[Fraction] = None

    @property
    def key(self) -> str:
        return f"t{self.task_index}@{self.index}"

    def sort_key(self) -> tuple[Fraction, Fraction, int, int]:
        """Priority order; ties fall back to release, task index, sequence."""
        return (self.priority, self.release, self.task_index, self.index)

    def freeze(self) -> Job:
        return Job(
            task=self.task,
            task_index=self.task_index,
            index=self.index,
            release=self.release,
            deadline=self.deadline,
            cost=self.cost,
            priority=self.priority,
            exec=tuple(self.intervals),
            completion=self.completion,
        )


@dataclass(slots=True)
class ProcessorState:
    processor: int
    running: Optional[JobRuntime] = None

    @property
    def idle(self) -> bool:
        return self.running is None
