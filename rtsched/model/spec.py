"""Study configuration models and semantic validation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .tasks import TaskSystem


KNOWN_ALGORITHMS = ("devi_anderson", "compliant_vector")


class PlatformSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    processors: int = Field(ge=1)


class SchedulerSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = "gedf"
    params: dict = Field(default_factory=dict)


class SimSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    horizon: float = Field(gt=0)
    seed: int = 42
    event_id_mode: str = "deterministic"

    @field_validator("event_id_mode")
    @classmethod
    def validate_event_id_mode(cls, value: str) -> str:
        mode = value.strip().lower()
        if mode not in {"deterministic", "random", "seeded_random"}:
            raise ValueError(f"unknown event_id_mode '{value}'")
        return mode


class AnalysisSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    algorithms: list[str] = Field(default_factory=lambda: list(KNOWN_ALGORITHMS), min_length=1)
    tolerance: float = Field(default=1e-9, gt=0)
    max_iterations: int = Field(default=1000, ge=1)

    @field_validator("algorithms")
    @classmethod
    def validate_algorithms(cls, value: list[str]) -> list[str]:
        normalized = [name.strip().lower() for name in value]
        for name in normalized:
            if name not in KNOWN_ALGORITHMS:
                raise ValueError(f"unknown bound algorithm '{name}'")
        return normalized


class ModelSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    tasks: TaskSystem
    platform: PlatformSpec
    scheduler: SchedulerSpec = Field(default_factory=SchedulerSpec)
    sim: SimSpec
    analysis: AnalysisSpec = Field(default_factory=AnalysisSpec)

    @model_validator(mode="after")
    def validate_semantics(self) -> "ModelSpec":
        if len(self.tasks) == 0:
            raise ValueError("task system must contain at least one task")
        return self
