from pathlib import Path
from typing import Optional


class PromptRulesError(Exception):
    """Base user-facing application error."""


class ConfigError(PromptRulesError):
    """The rule configuration cannot be trusted; no matching may happen."""

    def __init__(
        self, rule_id: Optional[str], field: Optional[str], detail: str
    ) -> None:
        self.rule_id = rule_id
        self.field = field
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        if self.rule_id is None:
            return f"Invalid rule configuration: {self.detail}"
        if self.field is None:
            return f"Invalid rule '{self.rule_id}': {self.detail}"
        return f"Invalid rule '{self.rule_id}' ({self.field}): {self.detail}"


class RulesFileError(ConfigError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(rule_id=None, field=None, detail=f"{message}: {path}")

    def _format(self) -> str:
        return self.detail


class MissingRulesFileError(RulesFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Missing rules file")


class InvalidRulesFormatError(RulesFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.format_detail = detail
        super().__init__(path=path, message=f"Invalid rules file format ({detail})")


class EvaluationError(PromptRulesError):
    """A single rule failed while being matched; recovered by skipping it."""

    def __init__(self, rule_id: str, detail: str) -> None:
        self.rule_id = rule_id
        self.detail = detail
        super().__init__(f"Rule '{rule_id}' failed to evaluate: {detail}")


class RenderError(PromptRulesError):
    def __init__(self, rule_id: str, detail: str) -> None:
        self.rule_id = rule_id
        self.detail = detail
        super().__init__(f"Rule '{rule_id}' failed to render: {detail}")


class InvalidHookInputError(PromptRulesError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid hook input ({detail})")
