"""JSON schema for configuration structure validation."""

from __future__ import annotations

CONFIG_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "rtsched Study Config",
    "type": "object",
    "required": ["version", "platform", "tasks", "sim"],
    "properties": {
        "version": {"type": "string"},
        "platform": {
            "type": "object",
            "required": ["processors"],
            "properties": {
                "processors": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
        "tasks": {
            "type": "array",
            "minItems": 1,
            "items": {"$ref": "#/$defs/Task"},
        },
        "scheduler": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string"},
                "params": {
                    "type": "object",
                    "default": {},
                    "properties": {
                        "max_delay": {"type": "number", "minimum": 0},
                        "seed": {"type": "integer"},
                    },
                },
            },
            "additionalProperties": False,
        },
        "sim": {
            "type": "object",
            "required": ["horizon"],
            "properties": {
                "horizon": {"type": "number", "exclusiveMinimum": 0},
                "seed": {"type": "integer"},
                "event_id_mode": {
                    "type": "string",
                    "enum": ["deterministic", "random", "seeded_random"],
                },
            },
            "additionalProperties": False,
        },
        "analysis": {
            "type": "object",
            "properties": {
                "algorithms": {
                    "type": "array",
                    "minItems": 1,
                    "items": {"type": "string"},
                },
                "tolerance": {"type": "number", "exclusiveMinimum": 0},
                "max_iterations": {"type": "integer", "minimum": 1},
            },
            "additionalProperties": False,
        },
    },
    "$defs": {
        "Task": {
            "type": "object",
            "required": ["period", "cost"],
            "properties": {
                "period": {"type": "number", "exclusiveMinimum": 0},
                "deadline": {"type": "number", "exclusiveMinimum": 0},
                "cost": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


BATCH_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "rtsched Batch Config",
    "type": "object",
    "required": ["base_config"],
    "properties": {
        "version": {"type": "string"},
        "base_config": {"type": "string"},
        "factors": {
            "type": "object",
            "additionalProperties": {"type": "array", "minItems": 1},
        },
        "mode": {"type": "string", "enum": ["simulate", "bound", "both"]},
        "output_dir": {"type": "string"},
    },
    "additionalProperties": False,
}
