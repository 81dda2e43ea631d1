from __future__ import annotations

from typing import Any

import jsonschema

SUITE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["cases"],
    "properties": {
        "name": {"type": ["string", "null"]},
        "cases": {
            "type": "array",
            "items": {"$ref": "#/definitions/case"},
        },
    },
    "additionalProperties": False,
    "definitions": {
        "environment": {
            "type": ["object", "null"],
            "additionalProperties": {"type": ["string", "number", "boolean", "null"]},
        },
        "references": {
            "type": ["array", "null"],
            "items": {"type": "string", "minLength": 1},
        },
        "case": {
            "type": "object",
            "properties": {
                "name": {"type": ["string", "null"]},
                "case": {"type": ["string", "null"]},
                "description": {"type": ["string", "null"]},
                "script": {"type": ["string", "null"]},
                "global_env": {"$ref": "#/definitions/environment"},
                "env": {"$ref": "#/definitions/environment"},
                "workdir": {"type": ["string", "null"]},
                "weight": {"type": ["integer", "null"], "minimum": 0},
                "skip": {"type": ["boolean", "null"]},
                "secret_phrase": {"type": ["string", "null"]},
                "before": {"$ref": "#/definitions/references"},
                "after": {"$ref": "#/definitions/references"},
            },
            "additionalProperties": False,
        },
    },
}


def validate_suite(payload: dict[str, Any]) -> None:
    jsonschema.validate(instance=payload, schema=SUITE_SCHEMA)
