"""Parse a loosely-typed rules document into validated rules."""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping, Optional

from jsonschema import Draft202012Validator

from prompt_rules.constants import RULES_ENVELOPE_KEYS
from prompt_rules.errors import ConfigError
from prompt_rules.rules.globs import GlobError, compile_glob
from prompt_rules.rules.models import (
    Classification,
    Enforcement,
    FileTriggers,
    Priority,
    PromptTriggers,
    Rule,
    SearchPattern,
    SkipConditions,
)
from prompt_rules.rules.schema import RULE_SCHEMA, format_schema_error

_VALIDATOR = Draft202012Validator(RULE_SCHEMA)


class BrokenPattern:
    """Stand-in for a regex that failed to compile during a lenient load."""

    def __init__(self, pattern: str, error: re.error) -> None:
        self.pattern = pattern
        self.error = error

    def failure(self) -> re.error:
        return re.error(f"{self.error} in pattern {self.pattern!r}")

    def search(self, string: str, /):
        raise self.failure()

    def __repr__(self) -> str:
        return f"BrokenPattern({self.pattern!r})"


class BrokenGlob:
    def __init__(self, source: str, error: Exception) -> None:
        self.source = source
        self.error = error

    def failure(self) -> GlobError:
        return GlobError(f"{self.error} in glob {self.source!r}")

    def matches(self, path: str) -> bool:
        raise self.failure()

    def __repr__(self) -> str:
        return f"BrokenGlob({self.source!r})"


def unwrap_document(document: Any) -> Any:
    """Return the rule mapping from either a bare mapping or a versioned envelope."""
    if isinstance(document, dict) and "version" in document:
        for key in RULES_ENVELOPE_KEYS:
            if key in document:
                return document[key]
        raise ConfigError(
            None, None, f"versioned document has none of {', '.join(RULES_ENVELOPE_KEYS)}"
        )
    return document


def parse_rules(document: Any, strict: bool = True) -> dict[str, Rule]:
    rules_raw = unwrap_document(document)
    if not isinstance(rules_raw, dict):
        raise ConfigError(None, None, "expected a mapping of rule id to rule definition")

    rules: dict[str, Rule] = {}
    for rule_id, raw in rules_raw.items():
        if not isinstance(rule_id, str) or not rule_id.strip():
            raise ConfigError(str(rule_id), None, "rule id must be a non-empty string")
        rules[rule_id] = parse_rule(rule_id, raw, strict=strict)
    return rules


def parse_rule(rule_id: str, raw: Any, strict: bool = True) -> Rule:
    if not isinstance(raw, dict):
        raise ConfigError(rule_id, None, "rule definition must be an object")

    error = next(iter(_VALIDATOR.iter_errors(raw)), None)
    if error is not None:
        field_path, message = format_schema_error(error)
        raise ConfigError(rule_id, field_path, message)

    if "promptTriggers" not in raw and "fileTriggers" not in raw:
        raise ConfigError(
            rule_id, None, "rule needs promptTriggers or fileTriggers (or both)"
        )

    classification_key = "classification" if "classification" in raw else "type"
    classification = _parse_enum(
        rule_id, classification_key, raw.get(classification_key, "domain"), Classification
    )
    enforcement = _parse_enum(
        rule_id, "enforcement", raw.get("enforcement", "suggest"), Enforcement
    )
    priority = _parse_enum(rule_id, "priority", raw.get("priority", "medium"), Priority)

    description = raw.get("description", "")
    payload = raw.get("payload", description)
    if not payload.strip():
        raise ConfigError(rule_id, "payload", "rule needs a payload or description")

    return Rule(
        id=rule_id,
        classification=classification,
        enforcement=enforcement,
        priority=priority,
        payload=payload,
        description=description,
        prompt_triggers=_parse_prompt_triggers(rule_id, raw.get("promptTriggers"), strict),
        file_triggers=_parse_file_triggers(rule_id, raw.get("fileTriggers"), strict),
        skip=_parse_skip_conditions(raw.get("skipConditions")),
    )


def _parse_enum(rule_id: str, field: str, value: Any, enum_type: type) -> Any:
    try:
        return enum_type(str(value).lower())
    except ValueError:
        allowed = ", ".join(item.value for item in enum_type)
        raise ConfigError(
            rule_id, field, f"unrecognized value {value!r} (expected one of: {allowed})"
        ) from None


def _parse_prompt_triggers(
    rule_id: str, raw: Optional[Mapping[str, Any]], strict: bool
) -> Optional[PromptTriggers]:
    if raw is None:
        return None
    keywords = tuple(item.strip() for item in raw.get("keywords", []) if item.strip())
    patterns = _compile_all(
        rule_id,
        "promptTriggers.intentPatterns",
        raw.get("intentPatterns", []),
        _compile_regex,
        BrokenPattern,
        strict,
    )
    if not keywords and not patterns:
        raise ConfigError(
            rule_id, "promptTriggers", "needs at least one keyword or intent pattern"
        )
    return PromptTriggers(keywords=keywords, intent_patterns=patterns)


def _parse_file_triggers(
    rule_id: str, raw: Optional[Mapping[str, Any]], strict: bool
) -> Optional[FileTriggers]:
    if raw is None:
        return None
    path_patterns = _compile_all(
        rule_id, "fileTriggers.pathPatterns", raw.get("pathPatterns", []),
        compile_glob, BrokenGlob, strict,
    )
    exclusions = _compile_all(
        rule_id, "fileTriggers.pathExclusions", raw.get("pathExclusions", []),
        compile_glob, BrokenGlob, strict,
    )
    content_patterns = _compile_all(
        rule_id, "fileTriggers.contentPatterns", raw.get("contentPatterns", []),
        _compile_regex, BrokenPattern, strict,
    )
    if not path_patterns and not content_patterns:
        raise ConfigError(
            rule_id, "fileTriggers", "needs at least one path or content pattern"
        )
    return FileTriggers(
        path_patterns=path_patterns,
        path_exclusions=exclusions,
        content_patterns=content_patterns,
    )


def _parse_skip_conditions(raw: Optional[Mapping[str, Any]]) -> SkipConditions:
    if raw is None:
        return SkipConditions()
    env_override = raw.get("envOverride") or None
    return SkipConditions(
        file_markers=tuple(item for item in raw.get("fileMarkers", []) if item),
        env_override=env_override,
        session_once=bool(raw.get("sessionOnce", False)),
    )


def _compile_regex(source: str) -> SearchPattern:
    return re.compile(source, re.IGNORECASE)


def _compile_all(
    rule_id: str,
    field: str,
    sources: list[str],
    compiler: Callable[[str], Any],
    broken: Callable[[str, Exception], Any],
    strict: bool,
) -> tuple:
    compiled: list[Any] = []
    for index, source in enumerate(sources):
        try:
            compiled.append(compiler(source))
        except (re.error, GlobError) as exc:
            if strict:
                raise ConfigError(
                    rule_id, f"{field}.{index}", f"cannot compile {source!r}: {exc}"
                ) from exc
            compiled.append(broken(source, exc))
    return tuple(compiled)
