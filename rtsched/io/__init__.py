"""I/O exports."""

from .experiment_runner import BatchRunSummary, ExperimentRunner
from .loader import ConfigError, ConfigLoader, ValidationIssue, read_payload
from .schema import BATCH_SCHEMA, CONFIG_SCHEMA
from .study import build_engine, run_bounds, run_simulation

__all__ = [
    "BATCH_SCHEMA",
    "BatchRunSummary",
    "CONFIG_SCHEMA",
    "ConfigError",
    "ConfigLoader",
    "ExperimentRunner",
    "ValidationIssue",
    "build_engine",
    "read_payload",
    "run_bounds",
    "run_simulation",
]
