"""JSON Schema for a single rule definition in the rules document."""

from typing import Any

_STRING_LIST: dict[str, Any] = {"type": "array", "items": {"type": "string"}}

RULE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "type": {"type": "string"},
        "classification": {"type": "string"},
        "enforcement": {"type": "string"},
        "priority": {"type": "string"},
        "description": {"type": "string"},
        "payload": {"type": "string"},
        "promptTriggers": {
            "type": "object",
            "properties": {
                "keywords": _STRING_LIST,
                "intentPatterns": _STRING_LIST,
            },
            "additionalProperties": False,
        },
        "fileTriggers": {
            "type": "object",
            "properties": {
                "pathPatterns": _STRING_LIST,
                "pathExclusions": _STRING_LIST,
                "contentPatterns": _STRING_LIST,
            },
            "additionalProperties": False,
        },
        "skipConditions": {
            "type": "object",
            "properties": {
                "fileMarkers": _STRING_LIST,
                "envOverride": {"type": "string"},
                "sessionOnce": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}


def format_schema_error(error: Any) -> tuple[str | None, str]:
    """Return the dotted field path and message of a jsonschema error."""
    path = ".".join([str(part) for part in error.path])
    return (path or None), str(error.message)
