"""In-process trace bus that numbers events as they are published."""

from __future__ import annotations

import random
import uuid
from typing import Callable

from .types import EventType, SimEvent


EventHandler = Callable[[SimEvent], None]

EVENT_ID_MODES = ("deterministic", "random", "seeded_random")


def normalize_event_id_mode(mode: str) -> str:
    normalized = str(mode).strip().lower()
    if normalized not in EVENT_ID_MODES:
        raise ValueError(f"unknown event_id_mode '{mode}', expected one of {', '.join(EVENT_ID_MODES)}")
    return normalized


class EventBus:
    """Delivers each published event to every handler, in subscription order.

    ``seq`` always counts from 0. ``event_id`` depends on the mode:
    ``evt-{seq:08d}`` when deterministic, a uuid4 when random, and 128 bits
    from ``random.Random(event_id_seed)`` when seeded_random.
    """

    def __init__(
        self,
        *,
        event_id_mode: str = "deterministic",
        event_id_seed: int | None = None,
    ) -> None:
        self._handlers: list[EventHandler] = []
        self._seq = 0
        self._event_id_mode = normalize_event_id_mode(event_id_mode)
        self._rng = random.Random(event_id_seed)

    @property
    def published(self) -> int:
        return self._seq

    def subscribe(self, handler: EventHandler) -> None:
        self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def _next_event_id(self) -> str:
        if self._event_id_mode == "random":
            return str(uuid.uuid4())
        if self._event_id_mode == "seeded_random":
            return f"{self._rng.getrandbits(128):032x}"
        return f"evt-{self._seq:08d}"

    def publish(
        self,
        *,
        event_type: EventType,
        time: float,
        correlation_id: str,
        job_id: str | None = None,
        task_index: int | None = None,
        processor: int | None = None,
        payload: dict | None = None,
    ) -> SimEvent:
        event = SimEvent(
            event_id=self._next_event_id(),
            seq=self._seq,
            correlation_id=correlation_id,
            time=float(time),
            type=event_type,
            job_id=job_id,
            task_index=task_index,
            processor=processor,
            payload=payload or {},
        )
        self._seq += 1
        for handler in list(self._handlers):
            handler(event)
        return event
