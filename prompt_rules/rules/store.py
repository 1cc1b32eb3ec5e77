"""Rule store loading and the per-process store cache."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

import yaml

from prompt_rules.constants import YAML_SUFFIXES
from prompt_rules.errors import InvalidRulesFormatError, MissingRulesFileError
from prompt_rules.rules.models import Rule
from prompt_rules.rules.parser import parse_rules

logger = logging.getLogger(__name__)


class RuleStore(Mapping[str, Rule]):
    """Read-only, insertion-ordered mapping of rule id to rule."""

    def __init__(self, rules: Mapping[str, Rule], source: Optional[Path] = None) -> None:
        self._rules = MappingProxyType(dict(rules))
        self.source = source

    @classmethod
    def from_document(
        cls, document: Any, source: Optional[Path] = None, strict: bool = True
    ) -> "RuleStore":
        return cls(parse_rules(document, strict=strict), source=source)

    @classmethod
    def load(cls, path: Path, strict: bool = True) -> "RuleStore":
        document = load_document(path)
        store = cls.from_document(document, source=path, strict=strict)
        logger.debug("Loaded %d rule(s) from %s", len(store), path)
        return store

    def __getitem__(self, rule_id: str) -> Rule:
        return self._rules[rule_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def rules(self) -> list[Rule]:
        return list(self._rules.values())


def load_document(path: Path) -> Any:
    if not path.exists() or not path.is_file():
        raise MissingRulesFileError(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidRulesFormatError(path, str(exc)) from exc

    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise InvalidRulesFormatError(path, f"YAML: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidRulesFormatError(path, f"JSON: {exc}") from exc


class RuleStoreCache:
    """Stores loaded once per path; invalidated only by reload() or clear()."""

    def __init__(self, strict: bool = True) -> None:
        self.strict = strict
        self._stores: dict[Path, RuleStore] = {}

    def get(self, path: Path) -> RuleStore:
        key = path.resolve()
        store = self._stores.get(key)
        if store is None:
            store = self.reload(path)
        return store

    def reload(self, path: Path) -> RuleStore:
        store = RuleStore.load(path, strict=self.strict)
        self._stores[path.resolve()] = store
        return store

    def clear(self) -> None:
        self._stores.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, Path) and path.resolve() in self._stores
