"""Periodic task descriptors and ordered task systems."""

from __future__ import annotations

from fractions import Fraction
import math
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, RootModel, field_validator, model_validator


Time = Union[int, float, Fraction]


def as_fraction(value: Time) -> Fraction:
    """Exact rational view of a task parameter or simulation time."""
    if isinstance(value, Fraction):
        return value
    return Fraction(value)


class Task(BaseModel):
    """Periodic real-time task.

    ``Task(period, deadline, cost)`` mirrors the usual notation; omitting the
    deadline gives an implicit-deadline task.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    period: Time
    deadline: Time
    cost: Time

    def __init__(
        self,
        period: Optional[Time] = None,
        deadline: Optional[Time] = None,
        cost: Optional[Time] = None,
        **data: Any,
    ) -> None:
        if period is not None:
            data["period"] = period
        if deadline is not None:
            data["deadline"] = deadline
        if cost is not None:
            data["cost"] = cost
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def default_deadline(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("deadline") is None and "period" in data:
            data = dict(data)
            data["deadline"] = data["period"]
        return data

    @field_validator("period", "deadline", "cost")
    @classmethod
    def validate_positive(cls, value: Time) -> Time:
        if isinstance(value, bool):
            raise ValueError("task parameters must be numbers")
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError("task parameters must be finite")
        if value <= 0:
            raise ValueError("task parameters must be > 0")
        return value

    @classmethod
    def implicit(cls, period: Time, cost: Time) -> "Task":
        return cls(period=period, deadline=period, cost=cost)

    def utilization(self) -> Fraction:
        return as_fraction(self.cost) / as_fraction(self.period)

    def density(self) -> Fraction:
        return as_fraction(self.cost) / min(as_fraction(self.period), as_fraction(self.deadline))

    def feasible(self) -> bool:
        return self.density() <= 1

    def implicit_deadline(self) -> bool:
        return as_fraction(self.deadline) == as_fraction(self.period)

    def constrained_deadline(self) -> bool:
        return as_fraction(self.deadline) <= as_fraction(self.period)

    def min_hit_ratio(self) -> Fraction:
        """Fraction of jobs that must meet their deadline; 1 for a hard task."""
        return Fraction(1)

    def min_utilization(self) -> Fraction:
        return self.utilization() * self.min_hit_ratio()

    def min_density(self) -> Fraction:
        return self.density() * self.min_hit_ratio()


class TaskSystem(RootModel[list[Task]]):
    """Ordered collection of tasks; index 0 is the highest fixed priority.

    The order only changes through :meth:`append`, :meth:`rate_monotonic` and
    :meth:`deadline_monotonic`.
    """

    root: list[Task]

    def __iter__(self) -> Iterator[Task]:  # type: ignore[override]
        return iter(self.root)

    def __getitem__(self, index: int) -> Task:
        return self.root[index]

    def __len__(self) -> int:
        return len(self.root)

    @property
    def tasks(self) -> list[Task]:
        return list(self.root)

    def append(self, task: Task) -> None:
        self.root.append(task)

    def rate_monotonic(self) -> "TaskSystem":
        self.root.sort(key=lambda task: as_fraction(task.period))
        return self

    def deadline_monotonic(self) -> "TaskSystem":
        self.root.sort(key=lambda task: as_fraction(task.deadline))
        return self

    def utilization(self) -> Fraction:
        return sum((task.utilization() for task in self.root), Fraction(0))

    def density(self) -> Fraction:
        return sum((task.density() for task in self.root), Fraction(0))

    def min_utilization(self) -> Fraction:
        return sum((task.min_utilization() for task in self.root), Fraction(0))

    def min_density(self) -> Fraction:
        return sum((task.min_density() for task in self.root), Fraction(0))

    def feasible(self) -> bool:
        return self.density() <= 1

    def implicit_deadline(self) -> bool:
        return all(task.implicit_deadline() for task in self.root)

    def constrained_deadline(self) -> bool:
        return all(task.constrained_deadline() for task in self.root)
