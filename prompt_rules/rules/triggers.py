"""Pure trigger evaluation of one rule against one match context."""

from __future__ import annotations

from typing import Iterable, Optional

from prompt_rules.rules.models import (
    EditedFile,
    FileTriggers,
    MatchCategory,
    MatchContext,
    PromptTriggers,
    Rule,
)


def skip_reason(rule: Rule, context: MatchContext) -> Optional[str]:
    """Return why ``rule`` is switched off for this context, if it is."""
    override = rule.skip.env_override
    if override and context.environ.get(override):
        return f"{rule.id}: disabled by ${override}"
    if rule.skip.session_once and rule.id in context.activated:
        return f"{rule.id}: already activated this session"
    return None


def keyword_match(triggers: PromptTriggers, prompt: str) -> bool:
    lowered = prompt.lower()
    return any(keyword.lower() in lowered for keyword in triggers.keywords)


def intent_match(triggers: PromptTriggers, prompt: str) -> bool:
    return any(pattern.search(prompt) for pattern in triggers.intent_patterns)


def evaluate_prompt(triggers: PromptTriggers, prompt: str) -> set[MatchCategory]:
    matched: set[MatchCategory] = set()
    if keyword_match(triggers, prompt):
        matched.add(MatchCategory.PROMPT_KEYWORD)
    if intent_match(triggers, prompt):
        matched.add(MatchCategory.PROMPT_INTENT)
    return matched


def path_match(triggers: FileTriggers, path: str) -> bool:
    return any(glob.matches(path) for glob in triggers.path_patterns)


def is_excluded(triggers: FileTriggers, path: str) -> bool:
    return any(glob.matches(path) for glob in triggers.path_exclusions)


def content_match(triggers: FileTriggers, snapshot: Optional[str]) -> bool:
    if snapshot is None:
        return False
    return any(pattern.search(snapshot) for pattern in triggers.content_patterns)


def evaluate_files(
    triggers: FileTriggers,
    files: Iterable[EditedFile],
    markers: tuple[str, ...] = (),
) -> set[MatchCategory]:
    matched: set[MatchCategory] = set()
    for edited in files:
        if is_excluded(triggers, edited.path):
            continue
        snapshot = edited.content_snapshot
        if markers and snapshot is not None and any(m in snapshot for m in markers):
            continue
        if MatchCategory.FILE_PATH not in matched and path_match(triggers, edited.path):
            matched.add(MatchCategory.FILE_PATH)
        if MatchCategory.FILE_CONTENT not in matched and content_match(triggers, snapshot):
            matched.add(MatchCategory.FILE_CONTENT)
        if len(matched) == 2:
            break
    return matched


def evaluate_rule(rule: Rule, context: MatchContext) -> frozenset[MatchCategory]:
    """Every category through which ``rule`` matches ``context``; empty when none."""
    matched: set[MatchCategory] = set()
    if rule.prompt_triggers is not None:
        matched |= evaluate_prompt(rule.prompt_triggers, context.prompt)
    if rule.file_triggers is not None and context.edited_files:
        matched |= evaluate_files(
            rule.file_triggers, context.edited_files, rule.skip.file_markers
        )
    return frozenset(matched)
