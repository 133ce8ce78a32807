"""Study configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from pydantic import ValidationError

from rtsched.model import ModelSpec

from .schema import CONFIG_SCHEMA


@dataclass(slots=True)
class ValidationIssue:
    path: str
    message: str


class ConfigError(Exception):
    """Configuration loading/validation error."""


def read_payload(path: str | Path) -> dict[str, Any]:
    """Read a YAML or JSON document whose root is an object."""
    input_path = Path(path)
    if not input_path.exists():
        raise ConfigError(f"config file not found: {path}")

    text = input_path.read_text(encoding="utf-8")
    try:
        if input_path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"invalid config syntax: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("config root must be object")
    return data


def validate_schema(payload: dict[str, Any], schema: dict[str, Any]) -> None:
    validator = jsonschema.Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda err: list(err.path))
    if not errors:
        return
    formatted = []
    for error in errors[:8]:
        path = ".".join(str(x) for x in error.path)
        formatted.append(f"{path or '<root>'}: {error.message}")
    raise ConfigError("schema validation failed: " + " | ".join(formatted))


def _plain(value: Any) -> Any:
    if isinstance(value, Fraction):
        return int(value) if value.denominator == 1 else float(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


class ConfigLoader:
    """Load and validate study specs from JSON/YAML files."""

    SUPPORTED_VERSION = "0.1"

    def load(self, path: str) -> ModelSpec:
        raw = read_payload(path)
        return self.load_data(raw)

    def load_data(self, payload: dict[str, Any]) -> ModelSpec:
        normalized = self._normalize_version(payload)
        validate_schema(normalized, CONFIG_SCHEMA)
        try:
            return ModelSpec.model_validate(normalized)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    def save(self, spec: ModelSpec, path: str) -> None:
        output_path = Path(path)
        payload = _plain(spec.model_dump(mode="python"))
        if output_path.suffix.lower() in {".yaml", ".yml"}:
            output_path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
        else:
            output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    def validate(self, spec_or_path: ModelSpec | str) -> list[ValidationIssue]:
        if isinstance(spec_or_path, ModelSpec):
            return []
        issues: list[ValidationIssue] = []
        try:
            self.load(spec_or_path)
        except ConfigError as exc:
            issues.append(ValidationIssue(path=spec_or_path, message=str(exc)))
        return issues

    def _normalize_version(self, payload: dict[str, Any]) -> dict[str, Any]:
        normalized_payload = dict(payload)
        version = str(normalized_payload.get("version", self.SUPPORTED_VERSION))
        if version != self.SUPPORTED_VERSION:
            raise ConfigError(f"unsupported config version '{version}'")
        normalized_payload["version"] = version
        return normalized_payload
