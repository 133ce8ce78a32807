"""Default metrics implementation."""

from __future__ import annotations

from collections import defaultdict

from rtsched.events import EventType, SimEvent

from .base import IMetric


class CoreMetrics(IMetric):
    """Aggregate key simulation metrics from event stream."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._job_release: dict[str, float] = {}
        self._job_deadline: dict[str, float] = {}
        self._job_task: dict[str, int] = {}
        self._job_complete: dict[str, float] = {}
        self._deadline_miss_jobs: set[str] = set()
        self._running: dict[str, tuple[float, int]] = {}
        self._processor_busy: dict[int, float] = defaultdict(float)
        self._preempt_count = 0
        self._migrate_count = 0
        self._event_count = 0
        self._max_time = 0.0

    def consume(self, event: SimEvent) -> None:
        self._event_count += 1
        self._max_time = max(self._max_time, event.time)

        if event.type == EventType.JOB_RELEASED:
            if event.job_id:
                self._job_release[event.job_id] = event.time
                if event.task_index is not None:
                    self._job_task[event.job_id] = event.task_index
                deadline = event.payload.get("absolute_deadline")
                if isinstance(deadline, (int, float)):
                    self._job_deadline[event.job_id] = float(deadline)

        elif event.type == EventType.JOB_START:
            if event.job_id and event.processor is not None:
                self._running[event.job_id] = (event.time, event.processor)

        elif event.type == EventType.PREEMPT:
            self._close_running(event.job_id, event.time)
            self._preempt_count += 1

        elif event.type == EventType.MIGRATE:
            self._migrate_count += 1

        elif event.type == EventType.DEADLINE_MISS:
            if event.job_id:
                self._deadline_miss_jobs.add(event.job_id)

        elif event.type == EventType.JOB_COMPLETE and event.job_id:
            self._close_running(event.job_id, event.time)
            self._job_complete[event.job_id] = event.time

        elif event.type == EventType.HORIZON_REACHED:
            for job_id in list(self._running):
                self._close_running(job_id, event.time)

    def _close_running(self, job_id: str | None, time: float) -> None:
        if job_id and job_id in self._running:
            start, processor = self._running.pop(job_id)
            self._processor_busy[processor] += max(0.0, time - start)

    def report(self) -> dict:
        response_times: list[float] = []
        tardiness_values: list[float] = []
        max_tardiness_by_task: dict[int, float] = {}

        for job_id, complete_time in self._job_complete.items():
            release_time = self._job_release.get(job_id)
            if release_time is not None:
                response_times.append(complete_time - release_time)
            deadline = self._job_deadline.get(job_id)
            if deadline is not None:
                tardiness = max(0.0, complete_time - deadline)
                tardiness_values.append(tardiness)
                task_index = self._job_task.get(job_id)
                if task_index is not None:
                    max_tardiness_by_task[task_index] = max(
                        max_tardiness_by_task.get(task_index, 0.0),
                        tardiness,
                    )

        total_jobs = max(1, len(self._job_release))
        avg_response = sum(response_times) / len(response_times) if response_times else 0.0

        utilization = {
            str(processor): (busy_time / self._max_time if self._max_time > 0 else 0.0)
            for processor, busy_time in sorted(self._processor_busy.items())
        }

        return {
            "jobs_released": len(self._job_release),
            "jobs_completed": len(self._job_complete),
            "deadline_miss_count": len(self._deadline_miss_jobs),
            "deadline_miss_ratio": len(self._deadline_miss_jobs) / total_jobs,
            "avg_response_time": avg_response,
            "max_response_time": max(response_times, default=0.0),
            "max_tardiness": max(tardiness_values, default=0.0),
            "max_tardiness_by_task": {str(k): v for k, v in sorted(max_tardiness_by_task.items())},
            "preempt_count": self._preempt_count,
            "migrate_count": self._migrate_count,
            "processor_utilization": utilization,
            "event_count": self._event_count,
            "max_time": self._max_time,
        }
