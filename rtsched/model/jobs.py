"""Concrete jobs, execution intervals and schedules produced by simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Iterator, Optional

from .tasks import Task, TaskSystem


@dataclass(frozen=True, slots=True)
class ExecInterval:
    """Half-open execution interval ``[start, stop)`` on one processor."""

    start: Fraction
    stop: Fraction
    processor: int

    def __post_init__(self) -> None:
        if not self.start < self.stop:
            raise ValueError(f"interval start {self.start} must precede stop {self.stop}")
        if self.processor < 0:
            raise ValueError("processor index must be >= 0")

    @property
    def length(self) -> Fraction:
        return self.stop - self.start

    def overlaps(self, other: "ExecInterval") -> bool:
        return self.start < other.stop and other.start < self.stop

    def contains(self, time: Fraction) -> bool:
        return self.start <= time < self.stop


@dataclass(frozen=True, slots=True)
class JobTemplate:
    """Release decision returned by a release policy.

    ``deadline`` is absolute. ``priority`` follows the scheduler convention of
    lower value meaning higher priority.
    """

    release: Fraction
    deadline: Fraction
    cost: Fraction
    priority: Fraction


@dataclass(frozen=True, slots=True)
class Job:
    """A released job of a task, frozen once the simulation run returns."""

    task: Task
    task_index: int
    index: int
    release: Fraction
    deadline: Fraction
    cost: Fraction
    priority: Fraction
    exec: tuple[ExecInterval, ...] = ()
    completion: Optional[Fraction] = None

    @property
    def key(self) -> str:
        return f"t{self.task_index}@{self.index}"

    @property
    def executed(self) -> Fraction:
        return sum((interval.length for interval in self.exec), Fraction(0))

    @property
    def completed(self) -> bool:
        return self.completion is not None

    @property
    def response_time(self) -> Optional[Fraction]:
        if self.completion is None:
            return None
        return self.completion - self.release

    @property
    def tardiness(self) -> Optional[Fraction]:
        if self.completion is None:
            return None
        return max(Fraction(0), self.completion - self.deadline)

    def missed_deadline(self, horizon: Optional[Fraction] = None) -> bool:
        """Whether the job is known to be late.

        An incomplete job counts as late only once ``horizon`` has reached its
        deadline.
        """
        if self.completion is not None:
            return self.completion > self.deadline
        return horizon is not None and horizon >= self.deadline


@dataclass(slots=True)
class Schedule:
    """Simulated trace: for each task in order, its jobs in release order."""

    tasks: TaskSystem
    processors: int
    horizon: Fraction
    jobs_by_task: list[list[Job]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.jobs_by_task)

    def __getitem__(self, task_index: int) -> list[Job]:
        return self.jobs_by_task[task_index]

    def __iter__(self) -> Iterator[list[Job]]:
        return iter(self.jobs_by_task)

    def jobs_of(self, task_index: int) -> list[Job]:
        return list(self.jobs_by_task[task_index])

    def jobs(self) -> list[Job]:
        return [job for task_jobs in self.jobs_by_task for job in task_jobs]

    def intervals(self) -> list[tuple[Job, ExecInterval]]:
        pairs = [(job, interval) for job in self.jobs() for interval in job.exec]
        pairs.sort(key=lambda pair: (pair[1].start, pair[1].processor))
        return pairs

    def running_at(self, time: Fraction) -> dict[int, Job]:
        """Map processor index to the job executing at ``time``."""
        running: dict[int, Job] = {}
        for job, interval in self.intervals():
            if interval.contains(time):
                running[interval.processor] = job
        return running

    def deadline_misses(self) -> list[Job]:
        return [job for job in self.jobs() if job.missed_deadline(self.horizon)]

    def hit_pattern(self, task_index: int) -> list[int]:
        """Deadline outcomes of a task in release order, 1 for met and 0 for missed.

        Jobs whose outcome is still open at the horizon are left out.
        """
        pattern: list[int] = []
        for job in self.jobs_by_task[task_index]:
            if job.missed_deadline(self.horizon):
                pattern.append(0)
            elif job.completed:
                pattern.append(1)
        return pattern
