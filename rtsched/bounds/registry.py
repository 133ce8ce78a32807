"""Bound algorithm registry and factory."""

from __future__ import annotations

from collections.abc import Callable

from .base import Algorithm, IBoundAlgorithm
from .compliant_vector import CompliantVectorBound
from .devi_anderson import DeviAndersonBound


BoundAlgorithmFactory = Callable[[], IBoundAlgorithm]


_REGISTRY: dict[str, BoundAlgorithmFactory] = {
    "devi_anderson": DeviAndersonBound,
    "da": DeviAndersonBound,
    "compliant_vector": CompliantVectorBound,
    "cv": CompliantVectorBound,
}


def register_bound_algorithm(name: str, factory: BoundAlgorithmFactory) -> None:
    _REGISTRY[name.strip().lower()] = factory


def create_bound_algorithm(name: str | Algorithm) -> IBoundAlgorithm:
    key = name.value if isinstance(name, Algorithm) else name.strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"unknown bound algorithm {name}")
    return _REGISTRY[key]()


def resolve_bound_algorithm(algorithm: str | Algorithm | IBoundAlgorithm) -> IBoundAlgorithm:
    if isinstance(algorithm, IBoundAlgorithm):
        return algorithm
    return create_bound_algorithm(algorithm)


def available_bound_algorithms() -> list[str]:
    return sorted(_REGISTRY)
