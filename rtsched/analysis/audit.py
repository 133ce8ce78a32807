"""Post-simulation audit checks for schedule invariants."""

from __future__ import annotations

from collections import defaultdict
from fractions import Fraction
from typing import Any

from rtsched.model import ExecInterval, Job, Schedule, as_fraction


_SAMPLE_LIMIT = 20


def _interval_view(job: Job, interval: ExecInterval) -> dict[str, Any]:
    return {
        "job_id": job.key,
        "start": float(interval.start),
        "stop": float(interval.stop),
        "processor": interval.processor,
    }


def _check(
    issues: list[dict[str, Any]],
    checks: dict[str, Any],
    rule: str,
    message: str,
    samples: list[dict[str, Any]],
) -> None:
    if samples:
        issues.append(
            {
                "rule": rule,
                "severity": "error",
                "message": message,
                "samples": samples[:_SAMPLE_LIMIT],
            }
        )
    checks[rule] = {"passed": not samples}


def build_audit_report(schedule: Schedule, *, check_periodic_release: bool = True) -> dict[str, Any]:
    """Check a finished schedule against the trace invariants.

    Pass ``check_periodic_release=False`` for traces produced by release
    policies that deliberately delay or compress releases.
    """
    issues: list[dict[str, Any]] = []
    checks: dict[str, Any] = {}

    cost_samples: list[dict[str, Any]] = []
    completion_samples: list[dict[str, Any]] = []
    order_samples: list[dict[str, Any]] = []
    release_samples: list[dict[str, Any]] = []
    range_samples: list[dict[str, Any]] = []
    for job in schedule.jobs():
        executed = job.executed
        if executed > job.cost:
            cost_samples.append(
                {"job_id": job.key, "executed": float(executed), "cost": float(job.cost)}
            )
        if job.completed:
            if executed != job.cost or not job.exec or job.exec[-1].stop != job.completion:
                completion_samples.append(
                    {
                        "job_id": job.key,
                        "executed": float(executed),
                        "cost": float(job.cost),
                        "completion": float(job.completion),
                    }
                )
        elif executed >= job.cost:
            completion_samples.append(
                {"job_id": job.key, "executed": float(executed), "cost": float(job.cost), "completion": None}
            )

        for previous, current in zip(job.exec, job.exec[1:]):
            if current.start < previous.stop:
                order_samples.append(
                    {
                        "job_id": job.key,
                        "previous": _interval_view(job, previous),
                        "current": _interval_view(job, current),
                    }
                )
        for interval in job.exec:
            if interval.start < job.release:
                release_samples.append({**_interval_view(job, interval), "release": float(job.release)})
            if interval.processor >= schedule.processors or interval.stop > schedule.horizon:
                range_samples.append(_interval_view(job, interval))

    _check(issues, checks, "executed_within_cost", "job executed longer than its cost", cost_samples)
    _check(
        issues,
        checks,
        "completion_consistency",
        "completion must coincide with the end of the interval that exhausts the cost",
        completion_samples,
    )
    _check(
        issues,
        checks,
        "job_interval_order",
        "intervals of one job must be disjoint and increasing",
        order_samples,
    )
    _check(issues, checks, "start_after_release", "job executed before its release", release_samples)
    _check(
        issues,
        checks,
        "interval_range",
        "interval outside the processor range or past the horizon",
        range_samples,
    )

    by_processor: defaultdict[int, list[tuple[Job, ExecInterval]]] = defaultdict(list)
    boundaries: list[tuple[Fraction, int]] = []
    for job, interval in schedule.intervals():
        by_processor[interval.processor].append((job, interval))
        boundaries.append((interval.start, 1))
        boundaries.append((interval.stop, -1))

    overlap_samples: list[dict[str, Any]] = []
    for processor in sorted(by_processor):
        entries = by_processor[processor]
        for (prev_job, prev), (job, current) in zip(entries, entries[1:]):
            if prev.overlaps(current):
                overlap_samples.append(
                    {
                        "processor": processor,
                        "previous": _interval_view(prev_job, prev),
                        "current": _interval_view(job, current),
                    }
                )
    _check(
        issues,
        checks,
        "processor_exclusive",
        "two intervals overlap on one processor",
        overlap_samples,
    )

    # Stops sort before starts at equal times.
    boundaries.sort()
    concurrency_samples: list[dict[str, Any]] = []
    running = 0
    peak = 0
    for time, delta in boundaries:
        running += delta
        peak = max(peak, running)
        if running > schedule.processors:
            concurrency_samples.append({"time": float(time), "running": running})
    _check(
        issues,
        checks,
        "concurrency_limit",
        "more jobs executing than processors",
        concurrency_samples,
    )
    checks["concurrency_limit"]["peak"] = peak

    if check_periodic_release:
        spacing_samples: list[dict[str, Any]] = []
        for task_index, jobs in enumerate(schedule):
            period = as_fraction(schedule.tasks[task_index].period)
            for previous, current in zip(jobs, jobs[1:]):
                if current.release < previous.release + period:
                    spacing_samples.append(
                        {
                            "task_index": task_index,
                            "previous_release": float(previous.release),
                            "release": float(current.release),
                            "period": float(period),
                        }
                    )
        _check(
            issues,
            checks,
            "periodic_release_spacing",
            "consecutive releases closer than the task period",
            spacing_samples,
        )

    return {
        "status": "pass" if not issues else "fail",
        "issue_count": len(issues),
        "issues": issues,
        "checks": checks,
    }
