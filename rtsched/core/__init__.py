"""Simulation core exports."""

from .engine import SimEngine
from .interfaces import ISimEngine
from .simulate import simulate_gedf, simulate_gfp, simulate_global

__all__ = ["ISimEngine", "SimEngine", "simulate_gedf", "simulate_gfp", "simulate_global"]
