"""Global multiprocessor real-time scheduling: exact simulation and GEDF bounds."""

from .model import (
    BestEffort,
    ExecInterval,
    HardRealTime,
    Job,
    JobTemplate,
    MeetAny,
    MeetRow,
    MissAny,
    MissRow,
    PeriodicWeaklyHardTask,
    Schedule,
    Task,
    TaskSystem,
    UniformMissRowSampler,
    WeaklyHardConstraint,
    satisfies,
    violates,
)
from .core import SimEngine, simulate_gedf, simulate_gfp, simulate_global
from .bounds import (
    Algorithm,
    BoundResult,
    BoundStatus,
    GEDFCompliantVector,
    GEDFDeviAnderson,
    SolverConfig,
    bound,
    response_time_gedf,
    tardiness_gedf,
)
from .analysis import build_audit_report, demand_bound, request_bound, schedulable_fixed_priority
from .generator import rand_task_system

__version__ = "0.3.0"

__all__ = [
    "Algorithm",
    "BestEffort",
    "BoundResult",
    "BoundStatus",
    "ExecInterval",
    "GEDFCompliantVector",
    "GEDFDeviAnderson",
    "HardRealTime",
    "Job",
    "JobTemplate",
    "MeetAny",
    "MeetRow",
    "MissAny",
    "MissRow",
    "PeriodicWeaklyHardTask",
    "Schedule",
    "SimEngine",
    "SolverConfig",
    "Task",
    "TaskSystem",
    "UniformMissRowSampler",
    "WeaklyHardConstraint",
    "bound",
    "build_audit_report",
    "demand_bound",
    "rand_task_system",
    "request_bound",
    "response_time_gedf",
    "satisfies",
    "schedulable_fixed_priority",
    "simulate_gedf",
    "simulate_gfp",
    "simulate_global",
    "tardiness_gedf",
    "violates",
]
