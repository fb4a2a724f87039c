"""JSON schemas for run configurations and reports."""
from __future__ import annotations

from jsonschema import Draft7Validator

SCHEMA_VERSION = "1.0.0"

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "voltest run configuration",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "connector": {"type": "string", "minLength": 1},
        "seed": {"type": "integer", "minimum": 0},
        "fail_fast": {"type": "boolean"},
        "limits": {"type": "object", "additionalProperties": {"type": "integer"}},
        "groups": {
            "type": "array",
            "items": {
                "oneOf": [
                    {"type": "string", "minLength": 1},
                    {
                        "type": "object",
                        "required": ["name"],
                        "additionalProperties": False,
                        "properties": {
                            "name": {"type": "string", "minLength": 1},
                            "target": {"type": "string", "pattern": "^[A-Za-z_][\\w.]*:[A-Za-z_][\\w.]*$"},
                            "params": {"type": "object"},
                        },
                    },
                ]
            },
        },
    },
}

REPORT_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "voltest report",
    "type": "object",
    "required": ["schema_version", "connector", "seed", "summary", "groups"],
    "properties": {
        "schema_version": {"type": "string"},
        "connector": {"type": "string"},
        "seed": {"type": "integer"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "errored", "errors", "duration_s"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errored": {"type": "integer"},
                "errors": {"type": "integer"},
                "duration_s": {"type": "number"},
            },
        },
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "status", "errors", "duration_ms", "seed"],
                "properties": {
                    "name": {"type": "string"},
                    "status": {"enum": ["passed", "failed", "error"]},
                    "errors": {"type": "integer", "minimum": 0},
                    "duration_ms": {"type": "number"},
                    "seed": {"type": "integer"},
                    "details": {"type": "string"},
                },
            },
        },
    },
}

config_validator = Draft7Validator(CONFIG_SCHEMA)
report_validator = Draft7Validator(REPORT_SCHEMA)
