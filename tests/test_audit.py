from __future__ import annotations

from fractions import Fraction

from rtsched.analysis import build_audit_report
from rtsched.core import simulate_gedf, simulate_global
from rtsched.model import ExecInterval, Job, Schedule, Task, TaskSystem
from rtsched.schedulers import SporadicGEDFPolicy


def _job(
    task: Task,
    task_index: int,
    index: int,
    release: int,
    intervals: list[tuple[int, int, int]],
    completion: int | None,
) -> Job:
    return Job(
        task=task,
        task_index=task_index,
        index=index,
        release=Fraction(release),
        deadline=Fraction(release) + task.deadline,
        cost=Fraction(task.cost),
        priority=Fraction(release) + task.deadline,
        exec=tuple(
            ExecInterval(start=Fraction(start), stop=Fraction(stop), processor=processor)
            for start, stop, processor in intervals
        ),
        completion=None if completion is None else Fraction(completion),
    )


def test_audit_passes_for_simulated_trace() -> None:
    tasks = TaskSystem([Task(period=5, cost=3), Task(period=7, deadline=6, cost=4), Task(period=4, cost=1)])
    report = build_audit_report(simulate_gedf(tasks, 2, 70))
    assert report["status"] == "pass"
    assert report["issue_count"] == 0
    assert report["checks"]["concurrency_limit"]["peak"] == 2
    assert all(check["passed"] for check in report["checks"].values())


def test_audit_passes_for_sporadic_trace() -> None:
    tasks = TaskSystem([Task(period=5, cost=2), Task(period=3, cost=1)])
    schedule = simulate_global(SporadicGEDFPolicy({"max_delay": 2.5, "seed": 9}), tasks, 1, 60)
    assert build_audit_report(schedule)["status"] == "pass"


def test_audit_flags_broken_trace() -> None:
    task = Task(period=4, cost=2)
    tasks = TaskSystem([task, task])
    schedule = Schedule(
        tasks=tasks,
        processors=1,
        horizon=Fraction(8),
        jobs_by_task=[
            [
                _job(task, 0, 0, 0, [(0, 2, 0)], 2),
                _job(task, 0, 1, 2, [(2, 4, 0)], 4),
            ],
            [
                _job(task, 1, 0, 1, [(0, 3, 0)], 3),
            ],
        ],
    )

    report = build_audit_report(schedule)
    failed = {issue["rule"] for issue in report["issues"]}
    assert report["status"] == "fail"
    assert failed == {
        "executed_within_cost",
        "completion_consistency",
        "start_after_release",
        "processor_exclusive",
        "concurrency_limit",
        "periodic_release_spacing",
    }

    relaxed = build_audit_report(schedule, check_periodic_release=False)
    assert "periodic_release_spacing" not in relaxed["checks"]


def test_audit_accepts_back_to_back_intervals_on_one_processor() -> None:
    task = Task(period=2, cost=1)
    tasks = TaskSystem([task, task])
    schedule = Schedule(
        tasks=tasks,
        processors=1,
        horizon=Fraction(2),
        jobs_by_task=[
            [_job(task, 0, 0, 0, [(0, 1, 0)], 1)],
            [_job(task, 1, 0, 0, [(1, 2, 0)], 2)],
        ],
    )
    report = build_audit_report(schedule)
    assert report["checks"]["processor_exclusive"]["passed"]
    assert report["status"] == "pass"
