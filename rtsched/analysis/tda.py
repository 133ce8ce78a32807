"""Uniprocessor time-demand analysis for fixed-priority task systems.

Schedulability is decided by level-i busy-period analysis, which is exact for
synchronous periodic tasks with arbitrary deadlines (Lehoczky, RTSS 1990).
Task order in the system is the priority order.
"""

from __future__ import annotations

from fractions import Fraction
import math
from typing import Iterable, Optional, Union

from rtsched.model import Task, TaskSystem, Time, as_fraction


TaskOrSystem = Union[Task, TaskSystem, Iterable[Task]]


def _tasks(target: TaskOrSystem) -> list[Task]:
    if isinstance(target, Task):
        return [target]
    return list(target)


def demand_bound(target: TaskOrSystem, interval: Time) -> Fraction:
    """Execution demand of jobs released and due within any window of length ``interval``."""
    t = as_fraction(interval)
    total = Fraction(0)
    for task in _tasks(target):
        jobs = math.floor((t - as_fraction(task.deadline)) / as_fraction(task.period)) + 1
        total += max(0, jobs) * as_fraction(task.cost)
    return total


def request_bound(target: TaskOrSystem, interval: Time) -> Fraction:
    """Execution requested by jobs released within ``[0, interval)`` of a synchronous release."""
    t = as_fraction(interval)
    return sum(
        (math.ceil(t / as_fraction(task.period)) * as_fraction(task.cost) for task in _tasks(target)),
        Fraction(0),
    )


def _least_fixed_point(own: Fraction, higher: list[Task], start: Fraction) -> Fraction:
    t = start
    while True:
        demand = own + request_bound(higher, t)
        if demand == t:
            return t
        t = demand


def busy_period(tasks: TaskOrSystem) -> Optional[Fraction]:
    """Length of the synchronous busy period, or ``None`` if utilization exceeds one."""
    members = _tasks(tasks)
    if not members:
        return Fraction(0)
    if sum((task.utilization() for task in members), Fraction(0)) > 1:
        return None
    return _least_fixed_point(Fraction(0), members, sum((as_fraction(t.cost) for t in members), Fraction(0)))


def response_time_fixed_priority(tasks: TaskSystem, index: int) -> Optional[Fraction]:
    """Worst-case response time of task ``index`` below all tasks preceding it."""
    members = _tasks(tasks)
    task = members[index]
    higher = members[:index]
    length = busy_period(members[: index + 1])
    if length is None:
        return None

    period = as_fraction(task.period)
    cost = as_fraction(task.cost)
    higher_cost = sum((as_fraction(t.cost) for t in higher), Fraction(0))
    worst = Fraction(0)
    for k in range(math.ceil(length / period)):
        own = (k + 1) * cost
        finish = _least_fixed_point(own, higher, own + higher_cost)
        worst = max(worst, finish - k * period)
    return worst


def response_times_fixed_priority(tasks: TaskSystem) -> list[Optional[Fraction]]:
    return [response_time_fixed_priority(tasks, index) for index in range(len(tasks))]


def schedulable_fixed_priority(tasks: TaskSystem) -> bool:
    """Whether every task meets its deadline under preemptive fixed priority on one processor."""
    for index, task in enumerate(tasks):
        response = response_time_fixed_priority(tasks, index)
        if response is None or response > as_fraction(task.deadline):
            return False
    return True
