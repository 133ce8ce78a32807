"""Trace audit and uniprocessor time-demand analysis."""

from .audit import build_audit_report
from .tda import (
    busy_period,
    demand_bound,
    request_bound,
    response_time_fixed_priority,
    response_times_fixed_priority,
    schedulable_fixed_priority,
)

__all__ = [
    "build_audit_report",
    "busy_period",
    "demand_bound",
    "request_bound",
    "response_time_fixed_priority",
    "response_times_fixed_priority",
    "schedulable_fixed_priority",
]
