"""Release policy exports."""

from .base import (
    FunctionReleasePolicy,
    IReleasePolicy,
    PeriodicReleasePolicy,
    ReleaseFunction,
    as_release_policy,
)
from .gedf import GEDFPolicy
from .gfp import GFPPolicy
from .registry import available_release_policies, create_release_policy, register_release_policy
from .sporadic import SporadicGEDFPolicy, SporadicGFPPolicy

__all__ = [
    "FunctionReleasePolicy",
    "GEDFPolicy",
    "GFPPolicy",
    "IReleasePolicy",
    "PeriodicReleasePolicy",
    "ReleaseFunction",
    "SporadicGEDFPolicy",
    "SporadicGFPPolicy",
    "as_release_policy",
    "available_release_policies",
    "create_release_policy",
    "register_release_policy",
]
