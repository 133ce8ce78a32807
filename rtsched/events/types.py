"""Schedule trace events emitted by the simulator."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(str, Enum):
    """Kinds of scheduling decisions recorded in a trace.

    Payload keys per kind:

    - ``JobReleased``: release_index, release, absolute_deadline, cost, priority
    - ``JobStart`` / ``Preempt``: remaining
    - ``Migrate``: from_processor, to_processor
    - ``JobComplete``: response_time, tardiness
    - ``DeadlineMiss``: absolute_deadline, completed
    - ``HorizonReached``: running_jobs, incomplete_jobs
    """

    JOB_RELEASED = "JobReleased"
    JOB_START = "JobStart"
    PREEMPT = "Preempt"
    MIGRATE = "Migrate"
    JOB_COMPLETE = "JobComplete"
    DEADLINE_MISS = "DeadlineMiss"
    HORIZON_REACHED = "HorizonReached"


class SimEvent(BaseModel):
    """One entry of the trace.

    ``correlation_id`` is the job key (``t{task}@{index}``) for job events and
    ``"engine"`` for the closing event. Times are floats for serialization;
    the schedule itself keeps exact values.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    event_id: str
    seq: int = Field(ge=0)
    correlation_id: str
    time: float = Field(ge=0)
    type: EventType
    job_id: Optional[str] = None
    task_index: Optional[int] = Field(default=None, ge=0)
    processor: Optional[int] = Field(default=None, ge=0)
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False)

    @classmethod
    def from_json(cls, line: str) -> "SimEvent":
        """Parse one line of an ``events.jsonl`` trace."""
        return cls.model_validate_json(line)
