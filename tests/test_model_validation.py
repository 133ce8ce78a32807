from __future__ import annotations

from fractions import Fraction

import pytest

from rtsched.model import ExecInterval, Job, Task, TaskSystem


def test_task_positional_and_implicit_deadline() -> None:
    task = Task(10, 8, 3)
    assert (task.period, task.deadline, task.cost) == (10, 8, 3)

    implicit = Task(period=3, cost=2)
    assert implicit.deadline == 3
    assert implicit.implicit_deadline()
    assert Task.implicit(5, 1) == Task(5, 5, 1)


def test_task_derived_quantities_are_exact() -> None:
    task = Task(period=6, deadline=4, cost=2)
    assert task.utilization() == Fraction(1, 3)
    assert task.density() == Fraction(1, 2)
    assert task.feasible()
    assert task.constrained_deadline()
    assert not task.implicit_deadline()

    overloaded = Task(period=2, deadline=1, cost=Fraction(3, 2))
    assert not overloaded.feasible()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"period": 0, "cost": 1},
        {"period": 5, "cost": -1},
        {"period": 5, "deadline": 0, "cost": 1},
        {"period": float("inf"), "cost": 1},
        {"period": 5, "cost": float("nan")},
    ],
)
def test_task_rejects_invalid_parameters(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        Task(**kwargs)


def test_task_is_immutable_and_hashable() -> None:
    task = Task(period=4, cost=1)
    with pytest.raises(ValueError):
        task.cost = 2  # type: ignore[misc]
    assert len({task, Task(period=4, cost=1)}) == 1


def test_task_system_aggregates_and_ordering() -> None:
    tasks = TaskSystem([Task(6, 6, 1), Task(3, 2, 1), Task(4, 4, 1)])
    assert len(tasks) == 3
    assert tasks.utilization() == Fraction(1, 6) + Fraction(1, 3) + Fraction(1, 4)
    assert tasks.constrained_deadline()
    assert not tasks.implicit_deadline()

    assert [task.period for task in tasks.rate_monotonic()] == [3, 4, 6]
    assert [task.deadline for task in tasks.deadline_monotonic()] == [2, 4, 6]

    tasks.append(Task(period=12, cost=1))
    assert tasks[3].period == 12


def test_rate_monotonic_sort_is_stable() -> None:
    first = Task(5, 5, 1)
    second = Task(5, 4, 2)
    tasks = TaskSystem([Task(8, 8, 1), first, second])
    tasks.rate_monotonic()
    assert tasks.tasks == [first, second, Task(8, 8, 1)]


def test_exec_interval_rejects_empty_or_negative_processor() -> None:
    with pytest.raises(ValueError):
        ExecInterval(start=Fraction(2), stop=Fraction(2), processor=0)
    with pytest.raises(ValueError):
        ExecInterval(start=Fraction(0), stop=Fraction(1), processor=-1)


def test_exec_interval_overlap_is_half_open() -> None:
    first = ExecInterval(start=Fraction(0), stop=Fraction(2), processor=0)
    touching = ExecInterval(start=Fraction(2), stop=Fraction(3), processor=0)
    inside = ExecInterval(start=Fraction(1, 2), stop=Fraction(1), processor=1)
    assert not first.overlaps(touching)
    assert first.overlaps(inside) and inside.overlaps(first)
    assert first.contains(Fraction(0)) and not first.contains(Fraction(2))


def test_job_derived_values() -> None:
    task = Task(period=5, cost=2)
    job = Job(
        task=task,
        task_index=0,
        index=1,
        release=Fraction(5),
        deadline=Fraction(10),
        cost=Fraction(2),
        priority=Fraction(10),
        exec=(
            ExecInterval(start=Fraction(6), stop=Fraction(7), processor=0),
            ExecInterval(start=Fraction(10), stop=Fraction(11), processor=1),
        ),
        completion=Fraction(11),
    )
    assert job.key == "t0@1"
    assert job.executed == 2
    assert job.completed
    assert job.response_time == 6
    assert job.tardiness == 1
    assert job.missed_deadline()


def test_incomplete_job_misses_only_once_horizon_reaches_deadline() -> None:
    job = Job(
        task=Task(period=5, cost=2),
        task_index=0,
        index=0,
        release=Fraction(0),
        deadline=Fraction(5),
        cost=Fraction(2),
        priority=Fraction(5),
    )
    assert job.response_time is None
    assert not job.missed_deadline(Fraction(4))
    assert job.missed_deadline(Fraction(5))
