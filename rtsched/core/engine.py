"""SimPy-backed global scheduling engine."""

from __future__ import annotations

from fractions import Fraction
import heapq
import logging
import math
from typing import Callable, Optional

import simpy

from rtsched.events import EventBus, EventType, SimEvent, normalize_event_id_mode
from rtsched.metrics import CoreMetrics, IMetric
from rtsched.model import (
    ExecInterval,
    JobRuntime,
    ProcessorState,
    Schedule,
    TaskSystem,
    Time,
    as_fraction,
)
from rtsched.schedulers import GEDFPolicy, IReleasePolicy, ReleaseFunction, as_release_policy

from .interfaces import ISimEngine


logger = logging.getLogger(__name__)


class SimEngine(ISimEngine):
    """Exact discrete-event engine using SimPy clock progression.

    All times are :class:`~fractions.Fraction` values, so completions land
    exactly on event boundaries. Every call to :meth:`build` starts from a
    fresh context; nothing is shared between runs except the read-only task
    system.
    """

    DEFAULT_EVENT_ID_MODE = "deterministic"

    def __init__(
        self,
        policy: IReleasePolicy | ReleaseFunction | None = None,
        metrics: list[IMetric] | None = None,
        *,
        event_id_mode: str = DEFAULT_EVENT_ID_MODE,
        event_id_seed: int | None = None,
    ) -> None:
        self._policy = as_release_policy(policy) if policy is not None else GEDFPolicy()
        self._metrics = metrics or [CoreMetrics()]
        self._subscribers: list[Callable[[SimEvent], None]] = []
        self._event_id_mode = normalize_event_id_mode(event_id_mode)
        self._event_id_seed = event_id_seed
        self.reset()

    @property
    def policy(self) -> IReleasePolicy:
        return self._policy

    def subscribe(self, handler: Callable[[SimEvent], None]) -> None:
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)
        self._event_bus.subscribe(handler)

    def build(self, tasks: TaskSystem, processors: int, horizon: Time) -> None:
        if isinstance(processors, bool) or not isinstance(processors, int):
            raise ValueError(f"processor count must be an integer, got {processors!r}")
        if processors < 1:
            raise ValueError(f"processor count must be >= 1, got {processors}")
        if isinstance(horizon, float) and not math.isfinite(horizon):
            raise ValueError("horizon must be finite")
        if horizon <= 0:
            raise ValueError(f"horizon must be > 0, got {horizon}")

        self.reset()
        self._tasks = tasks
        self._horizon = as_fraction(horizon)
        self._processors = [ProcessorState(processor=idx) for idx in range(processors)]
        self._jobs_by_task = [[] for _ in range(len(tasks))]
        self._policy.init()
        for task_index in range(len(tasks)):
            self._queue_next_release(task_index, previous=None)
        self._built = True
        logger.debug(
            "built %s run: tasks=%d processors=%d horizon=%s",
            self._policy.name,
            len(tasks),
            processors,
            self._horizon,
        )

    def run(self, until: Time | None = None) -> None:
        if not self._built:
            raise RuntimeError("build() must be called before run()")
        target = self._horizon if until is None else min(as_fraction(until), self._horizon)

        while self.now < target and not self._stopped:
            if self._paused:
                break
            progressed = self._advance_once(target)
            if not progressed:
                break

        if self.now >= self._horizon and not self._finalized:
            self._finalize_horizon()

    def step(self) -> None:
        if not self._built:
            raise RuntimeError("build() must be called before step()")
        if self.now < self._horizon and not self._stopped:
            self._advance_once(self._horizon)
        if self.now >= self._horizon and not self._finalized:
            self._finalize_horizon()

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def stop(self) -> None:
        self._stopped = True

    def reset(self) -> None:
        self._env = simpy.Environment(initial_time=Fraction(0))
        for metric in self._metrics:
            metric.reset()
        self._event_bus = self._create_event_bus()
        self._events: list[SimEvent] = []
        self._setup_event_pipeline()

        self._tasks: TaskSystem | None = None
        self._horizon = Fraction(0)
        self._processors: list[ProcessorState] = []
        self._jobs_by_task: list[list[JobRuntime]] = []
        self._ready: list[tuple[tuple[Fraction, Fraction, int, int], JobRuntime]] = []
        self._release_heap: list[tuple[Fraction, int, int, JobRuntime]] = []
        self._built = False
        self._finalized = False
        self._paused = False
        self._stopped = False

    def _setup_event_pipeline(self) -> None:
        self._event_bus.subscribe(self._events.append)
        for metric in self._metrics:
            self._event_bus.subscribe(metric.consume)
        for handler in self._subscribers:
            self._event_bus.subscribe(handler)

    def _create_event_bus(self) -> EventBus:
        return EventBus(
            event_id_mode=self._event_id_mode,
            event_id_seed=self._event_id_seed,
        )

    @property
    def events(self) -> list[SimEvent]:
        return list(self._events)

    @property
    def now(self) -> Fraction:
        return as_fraction(self._env.now)

    @property
    def horizon(self) -> Fraction:
        return self._horizon

    def metric_report(self) -> dict:
        merged: dict = {}
        for metric in self._metrics:
            merged.update(metric.report())
        utilization = merged.get("processor_utilization")
        if isinstance(utilization, dict):
            for state in self._processors:
                utilization.setdefault(str(state.processor), 0.0)
        return merged

    def schedule(self) -> Schedule:
        """Freeze the jobs generated so far into a :class:`Schedule`.

        Intervals still open on a running processor are not part of the
        snapshot; after a run reaches the horizon every interval is closed.
        """
        if self._tasks is None:
            raise RuntimeError("build() must be called before schedule()")
        return Schedule(
            tasks=self._tasks,
            processors=len(self._processors),
            horizon=self._horizon,
            jobs_by_task=[[job.freeze() for job in jobs] for jobs in self._jobs_by_task],
        )

    def _queue_next_release(self, task_index: int, previous: Optional[JobRuntime]) -> None:
        assert self._tasks is not None
        task = self._tasks[task_index]
        template = self._policy.release(task, task_index, previous.freeze() if previous else None)
        release = as_fraction(template.release)
        cost = as_fraction(template.cost)
        if release < 0:
            raise ValueError(f"release policy {self._policy.name} produced negative release {release}")
        if cost <= 0:
            raise ValueError(f"release policy {self._policy.name} produced non-positive cost {cost}")
        if previous is not None and release <= previous.release:
            raise ValueError(
                f"release policy {self._policy.name} released task {task_index} at {release}, "
                f"not after its previous job at {previous.release}"
            )
        if release >= self._horizon:
            return

        index = previous.index + 1 if previous is not None else 0
        job = JobRuntime(
            task=task,
            task_index=task_index,
            index=index,
            release=release,
            deadline=as_fraction(template.deadline),
            cost=cost,
            priority=as_fraction(template.priority),
            remaining=cost,
        )
        heapq.heappush(self._release_heap, (release, task_index, index, job))

    def _advance_once(self, horizon: Fraction) -> bool:
        now = self.now
        self._process_releases(now)
        self._dispatch(now)

        next_times: list[Fraction] = []
        if self._release_heap:
            next_times.append(self._release_heap[0][0])
        for state in self._processors:
            if state.running is not None:
                next_times.append(now + state.running.remaining)

        next_time = min(next_times) if next_times else horizon
        next_time = min(next_time, horizon)
        if next_time <= now:
            return False

        timeout = self._env.timeout(next_time - now)
        self._env.run(until=timeout)

        elapsed = self.now - now
        for state in self._processors:
            if state.running is not None:
                state.running.remaining -= elapsed
        self._complete_finished_jobs(self.now)
        return True

    def _process_releases(self, now: Fraction) -> None:
        while self._release_heap and self._release_heap[0][0] <= now:
            _, task_index, _, job = heapq.heappop(self._release_heap)
            self._jobs_by_task[task_index].append(job)
            heapq.heappush(self._ready, (job.sort_key(), job))
            self._event_bus.publish(
                event_type=EventType.JOB_RELEASED,
                time=now,
                correlation_id=job.key,
                job_id=job.key,
                task_index=task_index,
                payload={
                    "release_index": job.index,
                    "release": float(job.release),
                    "absolute_deadline": float(job.deadline),
                    "cost": float(job.cost),
                    "priority": float(job.priority),
                },
            )
            self._queue_next_release(task_index, previous=job)

    def _dispatch(self, now: Fraction) -> None:
        for state in self._processors:
            if not self._ready:
                break
            if state.idle:
                _, job = heapq.heappop(self._ready)
                self._start(job, state, now)

        while self._ready:
            best_key, best = self._ready[0]
            victim = self._lowest_priority_running()
            if victim is None or not best_key < victim.running.sort_key():
                break
            heapq.heappop(self._ready)
            self._preempt(victim, now)
            self._start(best, victim, now)

    def _lowest_priority_running(self) -> Optional[ProcessorState]:
        busy = [state for state in self._processors if state.running is not None]
        if not busy:
            return None
        return max(busy, key=lambda state: state.running.sort_key())

    def _start(self, job: JobRuntime, state: ProcessorState, now: Fraction) -> None:
        if job.last_processor is not None and job.last_processor != state.processor:
            self._event_bus.publish(
                event_type=EventType.MIGRATE,
                time=now,
                correlation_id=job.key,
                job_id=job.key,
                task_index=job.task_index,
                processor=state.processor,
                payload={"from_processor": job.last_processor, "to_processor": state.processor},
            )
        state.running = job
        job.running_on = state.processor
        job.running_since = now
        job.last_processor = state.processor
        self._event_bus.publish(
            event_type=EventType.JOB_START,
            time=now,
            correlation_id=job.key,
            job_id=job.key,
            task_index=job.task_index,
            processor=state.processor,
            payload={"remaining": float(job.remaining)},
        )

    def _close_interval(self, job: JobRuntime, now: Fraction) -> None:
        assert job.running_since is not None and job.running_on is not None
        if now > job.running_since:
            job.intervals.append(ExecInterval(start=job.running_since, stop=now, processor=job.running_on))
        job.running_on = None
        job.running_since = None

    def _preempt(self, state: ProcessorState, now: Fraction) -> None:
        job = state.running
        assert job is not None
        processor = state.processor
        self._close_interval(job, now)
        state.running = None
        heapq.heappush(self._ready, (job.sort_key(), job))
        self._event_bus.publish(
            event_type=EventType.PREEMPT,
            time=now,
            correlation_id=job.key,
            job_id=job.key,
            task_index=job.task_index,
            processor=processor,
            payload={"remaining": float(job.remaining)},
        )

    def _complete_finished_jobs(self, now: Fraction) -> None:
        for state in self._processors:
            job = state.running
            if job is None or job.remaining > 0:
                continue
            processor = state.processor
            self._close_interval(job, now)
            state.running = None
            job.remaining = Fraction(0)
            job.completion = now
            response_time = now - job.release
            self._event_bus.publish(
                event_type=EventType.JOB_COMPLETE,
                time=now,
                correlation_id=job.key,
                job_id=job.key,
                task_index=job.task_index,
                processor=processor,
                payload={
                    "response_time": float(response_time),
                    "tardiness": float(max(Fraction(0), now - job.deadline)),
                },
            )
            if now > job.deadline:
                self._publish_deadline_miss(job, now, completed=True)

    def _publish_deadline_miss(self, job: JobRuntime, now: Fraction, *, completed: bool) -> None:
        self._event_bus.publish(
            event_type=EventType.DEADLINE_MISS,
            time=now,
            correlation_id=job.key,
            job_id=job.key,
            task_index=job.task_index,
            payload={"absolute_deadline": float(job.deadline), "completed": completed},
        )

    def _finalize_horizon(self) -> None:
        now = self._horizon
        running = [state.running for state in self._processors if state.running is not None]
        for state in self._processors:
            if state.running is not None:
                self._close_interval(state.running, now)
                state.running = None

        incomplete = [
            job
            for jobs in self._jobs_by_task
            for job in jobs
            if job.completion is None
        ]
        for job in incomplete:
            if job.deadline <= now:
                self._publish_deadline_miss(job, now, completed=False)
        self._event_bus.publish(
            event_type=EventType.HORIZON_REACHED,
            time=now,
            correlation_id="engine",
            payload={
                "running_jobs": [job.key for job in running],
                "incomplete_jobs": [job.key for job in incomplete],
            },
        )
        self._finalized = True
        logger.debug(
            "finished %s run at %s: %d incomplete job(s)",
            self._policy.name,
            now,
            len(incomplete),
        )
