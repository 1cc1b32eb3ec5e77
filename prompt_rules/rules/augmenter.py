"""Render matched rules into instruction text and inject it into the prompt."""

from __future__ import annotations

import logging
import re
from typing import Literal, Sequence

from prompt_rules.errors import RenderError
from prompt_rules.rules.models import MatchResult

logger = logging.getLogger(__name__)

Position = Literal["prepend", "append"]

BLOCK_HEADER = "REQUIRED GUIDANCE (must be followed before proceeding):"
SUGGEST_HEADER = "SUGGESTED GUIDANCE (consider if relevant):"

PLACEHOLDER_RE = re.compile(r"\{(rule_id|description|priority|enforcement)\}")


class PromptAugmenter:
    def __init__(self, position: Position = "prepend", separator: str = "\n\n") -> None:
        if position not in ("prepend", "append"):
            raise ValueError(f"Unknown position: {position}")
        self.position = position
        self.separator = separator

    def render(self, results: Sequence[MatchResult]) -> str:
        """Render ``results`` as one text block.

        Blocking matches come first regardless of input order. Raises
        ``RenderError`` naming the first rule whose payload cannot be rendered.
        """
        blocking = [result for result in results if result.is_blocking]
        suggested = [result for result in results if not result.is_blocking]

        sections: list[str] = []
        if blocking:
            lines = [BLOCK_HEADER]
            lines.extend(self._render_entry(result, mandatory=True) for result in blocking)
            sections.append("\n".join(lines))
        if suggested:
            lines = [SUGGEST_HEADER]
            lines.extend(self._render_entry(result, mandatory=False) for result in suggested)
            sections.append("\n".join(lines))
        return "\n\n".join(sections)

    def render_safe(self, results: Sequence[MatchResult]) -> str:
        """Like render(), but an empty string when nothing matched or rendering failed."""
        if not results:
            return ""
        try:
            return self.render(results)
        except RenderError as exc:
            logger.warning("%s; no guidance injected", exc)
            return ""

    def augment(self, prompt: str, results: Sequence[MatchResult]) -> str:
        return self.inject(prompt, self.render_safe(results))

    def inject(self, prompt: str, block: str) -> str:
        if not block:
            return prompt
        if self.position == "append":
            return f"{prompt}{self.separator}{block}"
        return f"{block}{self.separator}{prompt}"

    def _render_entry(self, result: MatchResult, mandatory: bool) -> str:
        rule = result.rule
        body = render_payload(result)
        reasons = ", ".join(result.reasons())
        if mandatory:
            head = f"- [{rule.id}] You must consult this guidance before proceeding (matched on: {reasons})."
        else:
            head = f"- [{rule.id}] Optional guidance (matched on: {reasons})."
        indented = "\n".join(f"  {line}" if line else "" for line in body.splitlines())
        return f"{head}\n{indented}"


def render_payload(result: MatchResult) -> str:
    rule = result.rule
    values = {
        "rule_id": rule.id,
        "description": rule.description,
        "priority": rule.priority.value,
        "enforcement": rule.enforcement.value,
    }
    try:
        return PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], rule.payload).strip()
    except (TypeError, AttributeError) as exc:
        raise RenderError(rule.id, f"{type(exc).__name__}: {exc}") from exc
