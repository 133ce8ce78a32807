"""Model package exports."""

from .jobs import ExecInterval, Job, JobTemplate, Schedule
from .runtime import JobRuntime, ProcessorState
from .spec import (
    AnalysisSpec,
    ModelSpec,
    PlatformSpec,
    SchedulerSpec,
    SimSpec,
)
from .tasks import Task, TaskSystem, Time, as_fraction
from .weakly_hard import (
    BestEffort,
    HardRealTime,
    MeetAny,
    MeetRow,
    MissAny,
    MissRow,
    PeriodicWeaklyHardTask,
    UniformMissRowSampler,
    WeaklyHardConstraint,
    satisfies,
    violates,
)

__all__ = [
    "AnalysisSpec",
    "BestEffort",
    "ExecInterval",
    "HardRealTime",
    "Job",
    "JobRuntime",
    "JobTemplate",
    "MeetAny",
    "MeetRow",
    "MissAny",
    "MissRow",
    "ModelSpec",
    "PeriodicWeaklyHardTask",
    "PlatformSpec",
    "ProcessorState",
    "Schedule",
    "SchedulerSpec",
    "SimSpec",
    "Task",
    "TaskSystem",
    "Time",
    "UniformMissRowSampler",
    "WeaklyHardConstraint",
    "as_fraction",
    "satisfies",
    "violates",
]
