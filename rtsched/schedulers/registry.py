"""Release policy registry and factory."""

from __future__ import annotations

from collections.abc import Callable

from .base import IReleasePolicy
from .gedf import GEDFPolicy
from .gfp import GFPPolicy
from .sporadic import SporadicGEDFPolicy, SporadicGFPPolicy


ReleasePolicyFactory = Callable[..., IReleasePolicy]


_REGISTRY: dict[str, ReleasePolicyFactory] = {
    "gedf": lambda params=None: GEDFPolicy(),
    "edf": lambda params=None: GEDFPolicy(),
    "earliest_deadline_first": lambda params=None: GEDFPolicy(),
    "gfp": lambda params=None: GFPPolicy(),
    "fixed_priority": lambda params=None: GFPPolicy(),
    "sporadic_gedf": lambda params=None: SporadicGEDFPolicy(params),
    "sporadic_gfp": lambda params=None: SporadicGFPPolicy(params),
}


def register_release_policy(name: str, factory: ReleasePolicyFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def create_release_policy(name: str, params: dict | None = None) -> IReleasePolicy:
    key = name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown scheduler {name}")
    return _REGISTRY[key](params or {})


def available_release_policies() -> list[str]:
    return sorted(_REGISTRY)
