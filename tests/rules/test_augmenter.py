"""Tests for rendering matches into the prompt."""

from dataclasses import replace

import pytest

from prompt_rules.errors import RenderError
from prompt_rules.rules.augmenter import (
    BLOCK_HEADER,
    SUGGEST_HEADER,
    PromptAugmenter,
    render_payload,
)
from prompt_rules.rules.matcher import RuleMatcher
from prompt_rules.rules.models import MatchContext
from prompt_rules.rules.store import RuleStore


def _store(**rules: dict) -> RuleStore:
    return RuleStore.from_document(rules)


def _rule(enforcement: str, payload: str, keyword: str = "go", priority: str = "medium") -> dict:
    return {
        "enforcement": enforcement,
        "priority": priority,
        "payload": payload,
        "promptTriggers": {"keywords": [keyword]},
    }


def _results(store: RuleStore, prompt: str = "go"):
    return RuleMatcher(store).match(MatchContext(prompt=prompt)).results


def test_identity_when_nothing_matches() -> None:
    prompt = "nothing to see here"

    assert PromptAugmenter().augment(prompt, []) is prompt


def test_block_rendered_before_suggest() -> None:
    store = _store(
        hint=_rule("suggest", "Optional hint.", priority="high"),
        guard=_rule("block", "Mandatory check.", priority="high"),
    )

    augmented = PromptAugmenter().augment("go", _results(store))

    assert augmented.index("Mandatory check.") < augmented.index("Optional hint.")
    assert augmented.index(BLOCK_HEADER) < augmented.index(SUGGEST_HEADER)
    assert "You must consult" in augmented
    assert augmented.endswith("\n\ngo")


def test_block_section_first_even_if_results_ranked_otherwise() -> None:
    store = _store(
        hint=_rule("suggest", "Optional hint.", priority="high"),
        guard=_rule("block", "Mandatory check.", priority="low"),
    )

    block = PromptAugmenter().render(_results(store))

    assert block.index("Mandatory check.") < block.index("Optional hint.")


def test_append_position() -> None:
    store = _store(hint=_rule("suggest", "Optional hint."))

    augmented = PromptAugmenter(position="append").augment("go", _results(store))

    assert augmented.startswith("go\n\n")
    assert SUGGEST_HEADER in augmented
    assert BLOCK_HEADER not in augmented


def test_unknown_position_rejected() -> None:
    with pytest.raises(ValueError):
        PromptAugmenter(position="middle")  # type: ignore[arg-type]


def test_payload_placeholders() -> None:
    store = _store(
        guide={
            "description": "Backend guide",
            "payload": "Open {rule_id} ({description}, {priority}).",
            "promptTriggers": {"keywords": ["go"]},
        }
    )

    text = render_payload(_results(store)[0])

    assert text == "Open guide (Backend guide, medium)."


def test_literal_braces_are_kept_verbatim() -> None:
    store = _store(
        guard=_rule("block", "Run the DB checks.", keyword="route"),
        api=_rule("suggest", 'Return errors as { "error": msg } from {rule_id}.', keyword="route"),
    )

    augmented = PromptAugmenter().augment("add a route", _results(store, "add a route"))

    assert "Run the DB checks." in augmented
    assert 'Return errors as { "error": msg } from api.' in augmented
    assert augmented.endswith("add a route")


def test_unknown_placeholder_left_untouched() -> None:
    store = _store(hint=_rule("suggest", "Use {x} and {{y}}."))

    assert render_payload(_results(store)[0]) == "Use {x} and {{y}}."


def test_render_error_leaves_prompt_unchanged(caplog) -> None:
    store = _store(
        good=_rule("block", "Fine."),
        bad=_rule("suggest", "Replaced below."),
    )
    results = [
        replace(result, rule=replace(result.rule, payload=None))
        if result.rule.id == "bad"
        else result
        for result in _results(store)
    ]

    with pytest.raises(RenderError) as excinfo:
        PromptAugmenter().render(results)
    assert excinfo.value.rule_id == "bad"

    with caplog.at_level("WARNING", logger="prompt_rules"):
        assert PromptAugmenter().augment("go", results) == "go"
    assert PromptAugmenter().render_safe(results) == ""


def test_augmentation_is_byte_identical_across_runs(rules_document: dict) -> None:
    store = RuleStore.from_document(rules_document)
    prompt = "create a route and a migration for the react component"

    first = PromptAugmenter().augment(prompt, _results(store, prompt))
    second = PromptAugmenter().augment(prompt, _results(store, prompt))

    assert first == second
    assert first != prompt
