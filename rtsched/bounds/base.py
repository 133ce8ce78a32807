"""Bound result types, solver configuration and the solver interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
import math
from typing import Any, Iterator, Optional, overload

from pydantic import BaseModel, ConfigDict, Field

from rtsched.model import TaskSystem, as_fraction


class Algorithm(str, Enum):
    DEVI_ANDERSON = "devi_anderson"
    COMPLIANT_VECTOR = "compliant_vector"


GEDFDeviAnderson = Algorithm.DEVI_ANDERSON
GEDFCompliantVector = Algorithm.COMPLIANT_VECTOR


class BoundStatus(str, Enum):
    BOUNDED = "bounded"
    INFEASIBLE = "infeasible"
    INCONCLUSIVE = "inconclusive"


class BoundKind(str, Enum):
    RESPONSE_TIME = "response_time"
    TARDINESS = "tardiness"


class SolverConfig(BaseModel):
    """Fixed-point iteration settings shared by all solvers."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    tolerance: float = Field(default=1e-9, gt=0)
    max_iterations: int = Field(default=1000, ge=1)


@dataclass(frozen=True, eq=False)
class BoundResult(Sequence):
    """Per-task bound vector aligned with task-system order.

    A bounded result reads like a tuple of floats; ``exact`` keeps the
    rational values. Infeasible and inconclusive results are empty and falsy.
    """

    status: BoundStatus
    algorithm: str
    processors: int
    exact: tuple[Fraction, ...] = ()
    iterations: int = 0
    kind: BoundKind = BoundKind.RESPONSE_TIME
    message: str = ""

    @classmethod
    def bounded(
        cls,
        algorithm: str,
        processors: int,
        exact: Sequence[Fraction],
        iterations: int,
    ) -> "BoundResult":
        return cls(
            status=BoundStatus.BOUNDED,
            algorithm=algorithm,
            processors=processors,
            exact=tuple(exact),
            iterations=iterations,
        )

    @classmethod
    def infeasible(cls, algorithm: str, processors: int, message: str) -> "BoundResult":
        return cls(
            status=BoundStatus.INFEASIBLE,
            algorithm=algorithm,
            processors=processors,
            message=message,
        )

    @classmethod
    def inconclusive(cls, algorithm: str, processors: int, iterations: int) -> "BoundResult":
        return cls(
            status=BoundStatus.INCONCLUSIVE,
            algorithm=algorithm,
            processors=processors,
            iterations=iterations,
            message=f"no fixed point within {iterations} iterations",
        )

    @property
    def values(self) -> tuple[float, ...]:
        return tuple(float(value) for value in self.exact)

    @property
    def is_bounded(self) -> bool:
        return self.status is BoundStatus.BOUNDED

    def tardiness(self, tasks: TaskSystem) -> "BoundResult":
        """Convert a response-time result to ``max(0, R_i - D_i)`` per task."""
        if self.kind is BoundKind.TARDINESS or not self.is_bounded:
            return BoundResult(
                status=self.status,
                algorithm=self.algorithm,
                processors=self.processors,
                exact=self.exact,
                iterations=self.iterations,
                kind=BoundKind.TARDINESS,
                message=self.message,
            )
        exact = tuple(
            max(Fraction(0), response - as_fraction(task.deadline))
            for response, task in zip(self.exact, tasks)
        )
        return BoundResult(
            status=self.status,
            algorithm=self.algorithm,
            processors=self.processors,
            exact=exact,
            iterations=self.iterations,
            kind=BoundKind.TARDINESS,
            message=self.message,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "algorithm": self.algorithm,
            "kind": self.kind.value,
            "processors": self.processors,
            "iterations": self.iterations,
            "values": list(self.values),
            "exact": [str(value) for value in self.exact],
            "message": self.message,
        }

    @overload
    def __getitem__(self, index: int) -> float: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[float, ...]: ...

    def __getitem__(self, index):
        return self.values[index]

    def __len__(self) -> int:
        return len(self.exact)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __bool__(self) -> bool:
        return self.is_bounded

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BoundResult):
            return (
                self.status == other.status
                and self.kind == other.kind
                and self.exact == other.exact
            )
        if isinstance(other, (list, tuple)):
            return self.is_bounded and list(self.exact) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


class IBoundAlgorithm(ABC):
    """Response-time bound solver for global EDF."""

    name = "custom"

    @abstractmethod
    def response_times(
        self,
        tasks: TaskSystem,
        processors: int,
        config: Optional[SolverConfig] = None,
    ) -> BoundResult:
        """Return per-task response-time bounds."""


def check_processors(processors: int) -> None:
    if isinstance(processors, bool) or not isinstance(processors, int):
        raise ValueError(f"processor count must be an integer, got {processors!r}")
    if processors < 1:
        raise ValueError(f"processor count must be >= 1, got {processors}")


def unbounded_reason(tasks: TaskSystem, processors: int) -> Optional[str]:
    """Return why tardiness under global EDF is unbounded, or ``None``."""
    utilization = tasks.utilization()
    if utilization > processors:
        return f"total utilization {float(utilization):.6g} exceeds {processors} processor(s)"
    for index, task in enumerate(tasks):
        if as_fraction(task.cost) > as_fraction(task.period):
            return f"task {index} has cost greater than its period"
    return None


def utilization_ceiling(tasks: TaskSystem) -> int:
    return math.ceil(tasks.utilization())
