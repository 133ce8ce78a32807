from __future__ import annotations

import pytest

from rtsched.core import SimEngine
from rtsched.events import EventBus, EventType, SimEvent
from rtsched.metrics import CoreMetrics
from rtsched.model import Task, TaskSystem
from rtsched.schedulers import GEDFPolicy


def test_deterministic_event_ids_follow_sequence() -> None:
    bus = EventBus()
    first = bus.publish(event_type=EventType.JOB_RELEASED, time=0, correlation_id="t0@0", job_id="t0@0")
    second = bus.publish(event_type=EventType.JOB_START, time=0, correlation_id="t0@0", processor=0)
    assert (first.event_id, first.seq) == ("evt-00000000", 0)
    assert (second.event_id, second.seq) == ("evt-00000001", 1)


def test_seeded_random_event_ids_are_reproducible() -> None:
    def _ids() -> list[str]:
        bus = EventBus(event_id_mode="seeded_random", event_id_seed=17)
        return [
            bus.publish(event_type=EventType.JOB_START, time=t, correlation_id="x").event_id
            for t in range(3)
        ]

    assert _ids() == _ids()
    assert len(set(_ids())) == 3


def test_subscribers_receive_every_event() -> None:
    received: list[SimEvent] = []
    engine = SimEngine(GEDFPolicy())
    engine.subscribe(received.append)
    engine.build(TaskSystem([Task(period=4, cost=1), Task(period=6, cost=2)]), 1, 12)
    engine.run()

    assert [event.model_dump() for event in received] == [event.model_dump() for event in engine.events]
    assert [event.seq for event in received] == list(range(len(received)))


def test_release_payload_carries_job_parameters() -> None:
    engine = SimEngine(GEDFPolicy())
    engine.build(TaskSystem([Task(period=4, deadline=3, cost=1)]), 1, 4)
    engine.run()

    released = engine.events[0]
    assert released.type == EventType.JOB_RELEASED
    assert released.task_index == 0
    assert released.payload == {
        "release_index": 0,
        "release": 0.0,
        "absolute_deadline": 3.0,
        "cost": 1.0,
        "priority": 3.0,
    }
    complete = next(event for event in engine.events if event.type == EventType.JOB_COMPLETE)
    assert complete.payload == {"response_time": 1.0, "tardiness": 0.0}


def test_unknown_event_id_mode_rejected() -> None:
    with pytest.raises(ValueError):
        SimEngine(event_id_mode="sequential")


def test_trace_lines_replay_into_same_metrics(tmp_path) -> None:
    engine = SimEngine(GEDFPolicy())
    engine.build(TaskSystem([Task(period=3, cost=2), Task(period=3, cost=2), Task(period=6, cost=4)]), 2, 12)
    engine.run()

    trace = tmp_path / "events.jsonl"
    trace.write_text("\n".join(event.to_json() for event in engine.events), encoding="utf-8")
    restored = [SimEvent.from_json(line) for line in trace.read_text(encoding="utf-8").splitlines()]

    assert restored == engine.events
    assert CoreMetrics().replay(restored) == engine.metric_report()


def test_bus_unsubscribe_stops_delivery() -> None:
    seen: list[SimEvent] = []
    bus = EventBus()
    bus.subscribe(seen.append)
    bus.publish(event_type=EventType.JOB_START, time=0, correlation_id="t0@0")
    bus.unsubscribe(seen.append)
    bus.publish(event_type=EventType.JOB_START, time=1, correlation_id="t0@0")
    assert len(seen) == 1
    assert bus.published == 2
