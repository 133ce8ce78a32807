"""Weakly-hard deadline constraints (Bernat, Burns & Llamosí, IEEE TC 2001).

A job outcome sequence is a bit string with ``1`` for a met deadline and
``0`` for a miss. Constraints that admit the same sequences compare equal
even when written differently, e.g.
``MeetAny(1, 1) == MeetRow(3, 5) == MissRow(0) == HardRealTime()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from fractions import Fraction
import random
from typing import Any, Iterable, Optional, Sequence

from .tasks import Task, Time


def _check_bits(bits: Iterable[Any]) -> list[int]:
    values = [int(bit) for bit in bits]
    if any(value not in (0, 1) for value in values):
        raise ValueError("outcome bits must be 0 (miss) or 1 (met)")
    return values


def _longest_run(bits: Sequence[int], value: int) -> int:
    longest = current = 0
    for bit in bits:
        current = current + 1 if bit == value else 0
        longest = max(longest, current)
    return longest


def _windows(bits: list[int], window: int) -> Iterable[list[int]]:
    # Sequences shorter than the window are judged as if followed by met deadlines.
    if len(bits) < window:
        yield bits + [1] * (window - len(bits))
        return
    for start in range(len(bits) - window + 1):
        yield bits[start : start + window]


class WeaklyHardConstraint(ABC):
    """Base of all weakly-hard constraints.

    Equality and hashing go through :meth:`canonical`, so logically
    equivalent constraints are interchangeable as dict keys.
    """

    @abstractmethod
    def canonical(self) -> tuple:
        """Normal form shared by every equivalent constraint."""

    @abstractmethod
    def satisfied_by(self, bits: list[int]) -> bool:
        """Whether the outcome sequence meets the constraint."""

    @abstractmethod
    def min_hit_ratio(self) -> Fraction:
        """Smallest long-run fraction of jobs that must meet their deadline."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeaklyHardConstraint):
            return NotImplemented
        return self.canonical() == other.canonical()

    def __hash__(self) -> int:
        return hash(self.canonical())


_HARD = ("hard",)
_BEST_EFFORT = ("best_effort",)


class HardRealTime(WeaklyHardConstraint):
    """No deadline may be missed."""

    def canonical(self) -> tuple:
        return _HARD

    def satisfied_by(self, bits: list[int]) -> bool:
        return all(bits)

    def min_hit_ratio(self) -> Fraction:
        return Fraction(1)

    def __repr__(self) -> str:
        return "HardRealTime()"


class BestEffort(WeaklyHardConstraint):
    """Any pattern of misses is acceptable."""

    def canonical(self) -> tuple:
        return _BEST_EFFORT

    def satisfied_by(self, bits: list[int]) -> bool:
        return True

    def min_hit_ratio(self) -> Fraction:
        return Fraction(0)

    def __repr__(self) -> str:
        return "BestEffort()"


class MissRow(WeaklyHardConstraint):
    """At most ``miss`` deadlines missed in a row."""

    def __init__(self, miss: int) -> None:
        if miss < 0:
            raise ValueError("MissRow requires miss >= 0")
        self.miss = miss

    def canonical(self) -> tuple:
        if self.miss == 0:
            return _HARD
        return ("miss_row", self.miss)

    def satisfied_by(self, bits: list[int]) -> bool:
        return _longest_run(bits, 0) <= self.miss

    def min_hit_ratio(self) -> Fraction:
        return Fraction(1, self.miss + 1)

    def __repr__(self) -> str:
        return f"MissRow({self.miss})"


def _check_window(kind: str, meet: int, window: int) -> None:
    if not 0 <= meet <= window:
        raise ValueError(f"{kind} requires 0 <= meet <= window, got meet={meet}, window={window}")


class MeetAny(WeaklyHardConstraint):
    """At least ``meet`` deadlines met in any ``window`` consecutive jobs."""

    def __init__(self, meet: int, window: int) -> None:
        _check_window("MeetAny", meet, window)
        self.meet = meet
        self.window = window

    def canonical(self) -> tuple:
        if self.meet == 0:
            return _BEST_EFFORT
        if self.meet == self.window:
            return _HARD
        if self.meet == 1:
            return MissRow(self.window - 1).canonical()
        return ("meet_any", self.meet, self.window)

    def satisfied_by(self, bits: list[int]) -> bool:
        return all(sum(chunk) >= self.meet for chunk in _windows(bits, self.window))

    def min_hit_ratio(self) -> Fraction:
        if self.window == 0:
            return Fraction(0)
        return Fraction(self.meet, self.window)

    def __repr__(self) -> str:
        return f"MeetAny({self.meet}, {self.window})"


def MissAny(miss: int, window: int) -> MeetAny:  # noqa: N802
    """At most ``miss`` deadlines missed in any ``window`` consecutive jobs."""
    if not 0 <= miss <= window:
        raise ValueError(f"MissAny requires 0 <= miss <= window, got miss={miss}, window={window}")
    return MeetAny(window - miss, window)


class MeetRow(WeaklyHardConstraint):
    """At least ``meet`` deadlines met in a row in any ``window`` consecutive jobs."""

    def __init__(self, meet: int, window: int) -> None:
        _check_window("MeetRow", meet, window)
        self.meet = meet
        self.window = window

    def canonical(self) -> tuple:
        if self.meet == 0:
            return _BEST_EFFORT
        if self.meet == 1:
            return MissRow(self.window - 1).canonical()
        # A single miss splits some window into two runs shorter than meet.
        if self.window <= 2 * self.meet - 1:
            return _HARD
        return ("meet_row", self.meet, self.window)

    def satisfied_by(self, bits: list[int]) -> bool:
        if self.canonical() == _HARD:
            return all(bits)
        return all(_longest_run(chunk, 1) >= self.meet for chunk in _windows(bits, self.window))

    def min_hit_ratio(self) -> Fraction:
        if self.meet == 0:
            return Fraction(0)
        if self.window <= 2 * self.meet - 1:
            return Fraction(1)
        return Fraction(self.meet, self.window - self.meet + 1)

    def __repr__(self) -> str:
        return f"MeetRow({self.meet}, {self.window})"


def satisfies(bits: Iterable[Any], constraint: WeaklyHardConstraint) -> bool:
    """Check that an outcome sequence (1 = met, 0 = missed) satisfies ``constraint``."""
    return constraint.satisfied_by(_check_bits(bits))


def violates(bits: Iterable[Any], constraint: WeaklyHardConstraint) -> bool:
    return not satisfies(bits, constraint)


class UniformMissRowSampler:
    """Draw outcome sequences of fixed length uniformly from a :class:`MissRow` language.

    Counts of valid completions are precomputed once (Bernardi & Giménez,
    Algorithmica 2012), so each sample costs one pass over the length.
    """

    def __init__(self, constraint: MissRow, length: int) -> None:
        if not isinstance(constraint, MissRow):
            raise TypeError("uniform sampling is only supported for MissRow constraints")
        if length < 0:
            raise ValueError("sample length must be >= 0")
        self.constraint = constraint
        self.length = length
        miss = constraint.miss
        # completions[k][r]: valid suffixes of length k after a trailing run of r misses.
        self._completions = [[1] * (miss + 1)]
        for _ in range(length):
            shorter = self._completions[-1]
            self._completions.append(
                [shorter[0] + (shorter[run + 1] if run < miss else 0) for run in range(miss + 1)]
            )

    def count(self) -> int:
        """Number of distinct sequences the sampler draws from."""
        return self._completions[self.length][0]

    def sample(self, rng: Optional[random.Random] = None) -> list[int]:
        rng = rng or random.Random()
        bits: list[int] = []
        run = 0
        for remaining in range(self.length, 0, -1):
            hits = self._completions[remaining - 1][0]
            if rng.randrange(self._completions[remaining][run]) < hits:
                bits.append(1)
                run = 0
            else:
                bits.append(0)
                run += 1
        return bits


class PeriodicWeaklyHardTask(Task):
    """Periodic task that tolerates deadline misses within ``constraint``."""

    constraint: WeaklyHardConstraint

    def __init__(
        self,
        period: Optional[Time] = None,
        deadline: Optional[Time] = None,
        cost: Optional[Time] = None,
        constraint: Optional[WeaklyHardConstraint] = None,
        **data: Any,
    ) -> None:
        if constraint is not None:
            data["constraint"] = constraint
        super().__init__(period, deadline, cost, **data)

    def min_hit_ratio(self) -> Fraction:
        return self.constraint.min_hit_ratio()
