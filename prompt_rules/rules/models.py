"""Rule and match data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Protocol


class Classification(str, Enum):
    GUARDRAIL = "guardrail"
    DOMAIN = "domain"


class Enforcement(str, Enum):
    BLOCK = "block"
    SUGGEST = "suggest"

    @property
    def rank(self) -> int:
        return 0 if self is Enforcement.BLOCK else 1


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class MatchCategory(str, Enum):
    PROMPT_KEYWORD = "prompt-keyword"
    PROMPT_INTENT = "prompt-intent"
    FILE_PATH = "file-path"
    FILE_CONTENT = "file-content"


class SearchPattern(Protocol):
    """Anything that can be searched in text: compiled regexes and broken stand-ins."""

    pattern: str

    def search(self, string: str, /): ...


class PathPattern(Protocol):
    source: str

    def matches(self, path: str) -> bool: ...


@dataclass(frozen=True)
class PromptTriggers:
    keywords: tuple[str, ...] = ()
    intent_patterns: tuple[SearchPattern, ...] = ()


@dataclass(frozen=True)
class FileTriggers:
    path_patterns: tuple[PathPattern, ...] = ()
    path_exclusions: tuple[PathPattern, ...] = ()
    content_patterns: tuple[SearchPattern, ...] = ()


@dataclass(frozen=True)
class SkipConditions:
    file_markers: tuple[str, ...] = ()
    env_override: Optional[str] = None
    session_once: bool = False


@dataclass(frozen=True)
class Rule:
    id: str
    classification: Classification
    enforcement: Enforcement
    priority: Priority
    payload: str
    description: str = ""
    prompt_triggers: Optional[PromptTriggers] = None
    file_triggers: Optional[FileTriggers] = None
    skip: SkipConditions = field(default_factory=SkipConditions)

    @property
    def sort_key(self) -> tuple[int, int]:
        return self.priority.rank, self.enforcement.rank


@dataclass(frozen=True)
class EditedFile:
    path: str
    content_snapshot: Optional[str] = None


@dataclass(frozen=True)
class MatchContext:
    prompt: str
    edited_files: tuple[EditedFile, ...] = ()
    activated: frozenset[str] = frozenset()
    environ: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )


@dataclass(frozen=True)
class MatchResult:
    rule: Rule
    matched_on: frozenset[MatchCategory]

    @property
    def is_blocking(self) -> bool:
        return self.rule.enforcement is Enforcement.BLOCK

    def reasons(self) -> list[str]:
        """Matched categories in their declaration order."""
        return [item.value for item in MatchCategory if item in self.matched_on]


@dataclass
class MatchReport:
    results: list[MatchResult]
    errors: list[Exception]
    skipped: list[str]

    @property
    def matched_ids(self) -> list[str]:
        return [result.rule.id for result in self.results]

    def has_blocking(self) -> bool:
        return any(result.is_blocking for result in self.results)

    def summary(self) -> dict[str, int]:
        return {
            "matched": len(self.results),
            "block": sum(1 for result in self.results if result.is_blocking),
            "suggest": sum(1 for result in self.results if not result.is_blocking),
            "errors": len(self.errors),
            "skipped": len(self.skipped),
        }
