"""Evaluate every rule of a store and rank the matches."""

from __future__ import annotations

import logging

from prompt_rules.errors import EvaluationError
from prompt_rules.rules.models import MatchContext, MatchReport, MatchResult, Rule
from prompt_rules.rules.parser import BrokenGlob, BrokenPattern
from prompt_rules.rules.store import RuleStore
from prompt_rules.rules.triggers import evaluate_rule, skip_reason

logger = logging.getLogger(__name__)


class RuleMatcher:
    def __init__(self, store: RuleStore) -> None:
        self.store = store

    def match(self, context: MatchContext) -> MatchReport:
        results: list[MatchResult] = []
        errors: list[Exception] = []
        skipped: list[str] = []

        for rule in self.store.values():
            reason = skip_reason(rule, context)
            if reason is not None:
                logger.debug("Skipping %s", reason)
                skipped.append(reason)
                continue
            try:
                _raise_if_broken(rule)
                matched_on = evaluate_rule(rule, context)
            except Exception as exc:
                error = EvaluationError(rule.id, str(exc))
                logger.warning("%s; rule skipped", error)
                errors.append(error)
                continue
            if matched_on:
                results.append(MatchResult(rule=rule, matched_on=matched_on))

        results.sort(key=lambda result: result.rule.sort_key)
        return MatchReport(results=results, errors=errors, skipped=skipped)


def _raise_if_broken(rule: Rule) -> None:
    """Raise the load error of any pattern a lenient load could not compile."""
    patterns: list[object] = []
    if rule.prompt_triggers is not None:
        patterns.extend(rule.prompt_triggers.intent_patterns)
    if rule.file_triggers is not None:
        triggers = rule.file_triggers
        patterns.extend(triggers.path_patterns)
        patterns.extend(triggers.path_exclusions)
        patterns.extend(triggers.content_patterns)
    for pattern in patterns:
        if isinstance(pattern, (BrokenPattern, BrokenGlob)):
            raise pattern.failure()


def match_rules(store: RuleStore, context: MatchContext) -> MatchReport:
    return RuleMatcher(store).match(context)
