from __future__ import annotations

from fractions import Fraction

import pytest

from rtsched.core.engine import SimEngine
from rtsched.core.interfaces import ISimEngine
from rtsched.events import EventType
from rtsched.model import Task, TaskSystem


def _engine() -> SimEngine:
    engine = SimEngine()
    engine.build(TaskSystem([Task(period=4, cost=1)]), 1, 8)
    return engine


def test_isimengine_declares_resume_and_stop() -> None:
    abstract_methods = ISimEngine.__abstractmethods__
    assert {"build", "run", "step", "pause", "resume", "stop", "schedule"} <= abstract_methods


def test_simengine_implements_interface_contract() -> None:
    assert isinstance(SimEngine(), ISimEngine)


def test_step_advances_to_next_event_boundary() -> None:
    engine = _engine()
    engine.step()
    assert engine.now == Fraction(1)
    engine.step()
    assert engine.now == Fraction(4)


def test_pause_then_resume_finishes_run() -> None:
    engine = _engine()
    engine.step()
    engine.pause()
    engine.run()
    assert engine.now == Fraction(1)

    engine.resume()
    engine.run()
    assert engine.now == Fraction(8)
    assert engine.events[-1].type == EventType.HORIZON_REACHED


def test_stop_is_permanent() -> None:
    engine = _engine()
    engine.stop()
    engine.run()
    engine.resume()
    engine.run()
    assert engine.now == 0
    assert engine.events == []


def test_methods_require_build() -> None:
    engine = SimEngine()
    with pytest.raises(RuntimeError):
        engine.run()
    with pytest.raises(RuntimeError):
        engine.step()
    with pytest.raises(RuntimeError):
        engine.schedule()
