"""Hook payloads exchanged with the assistant runtime over stdin/stdout."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from prompt_rules.constants import PROMPT_HOOK_EVENT
from prompt_rules.errors import InvalidHookInputError


@dataclass(frozen=True)
class PromptHookInput:
    session_id: str
    prompt: str
    cwd: Optional[str] = None
    transcript_path: Optional[str] = None


@dataclass(frozen=True)
class ToolHookInput:
    session_id: str
    tool_name: str
    file_paths: tuple[str, ...]
    cwd: Optional[str] = None


def _load_object(text: str) -> dict[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidHookInputError(f"JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidHookInputError("expected a JSON object")
    return payload


def _optional_str(payload: dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return value if isinstance(value, str) and value else None


def parse_prompt_input(text: str) -> PromptHookInput:
    payload = _load_object(text)
    prompt = payload.get("prompt")
    if not isinstance(prompt, str):
        raise InvalidHookInputError("missing 'prompt' string")
    return PromptHookInput(
        session_id=str(payload.get("session_id") or ""),
        prompt=prompt,
        cwd=_optional_str(payload, "cwd"),
        transcript_path=_optional_str(payload, "transcript_path"),
    )


def parse_tool_input(text: str) -> ToolHookInput:
    payload = _load_object(text)
    tool_input = payload.get("tool_input") or {}
    if not isinstance(tool_input, dict):
        raise InvalidHookInputError("'tool_input' must be an object")

    paths: list[str] = []
    for key in ("file_path", "notebook_path"):
        value = tool_input.get(key)
        if isinstance(value, str) and value:
            paths.append(value)
    edits = tool_input.get("edits")
    if isinstance(edits, list):
        for item in edits:
            if isinstance(item, dict) and isinstance(item.get("file_path"), str):
                paths.append(item["file_path"])

    return ToolHookInput(
        session_id=str(payload.get("session_id") or ""),
        tool_name=str(payload.get("tool_name") or ""),
        file_paths=tuple(dict.fromkeys(paths)),
        cwd=_optional_str(payload, "cwd"),
    )


def hook_output(additional_context: str) -> str:
    """Serialize injected context in the prompt-submit hook output shape."""
    output = {
        "hookSpecificOutput": {
            "hookEventName": PROMPT_HOOK_EVENT,
            "additionalContext": additional_context,
        }
    }
    return json.dumps(output, indent=2)


def parse_session_id(text: str) -> str:
    """Session id from any hook payload; empty when the payload carries none."""
    return str(_load_object(text).get("session_id") or "")
