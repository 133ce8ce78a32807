"""Global EDF response-time and tardiness bounds."""

from .base import (
    Algorithm,
    BoundKind,
    BoundResult,
    BoundStatus,
    GEDFCompliantVector,
    GEDFDeviAnderson,
    IBoundAlgorithm,
    SolverConfig,
)
from .compliant_vector import CompliantVectorBound
from .devi_anderson import DeviAndersonBound
from .gedf import bound, response_time_gedf, tardiness_gedf
from .registry import (
    available_bound_algorithms,
    create_bound_algorithm,
    register_bound_algorithm,
    resolve_bound_algorithm,
)

__all__ = [
    "Algorithm",
    "BoundKind",
    "BoundResult",
    "BoundStatus",
    "CompliantVectorBound",
    "DeviAndersonBound",
    "GEDFCompliantVector",
    "GEDFDeviAnderson",
    "IBoundAlgorithm",
    "SolverConfig",
    "available_bound_algorithms",
    "bound",
    "create_bound_algorithm",
    "register_bound_algorithm",
    "resolve_bound_algorithm",
    "response_time_gedf",
    "tardiness_gedf",
]
