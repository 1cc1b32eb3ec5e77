from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from prompt_rules.constants import CACHE_RELATIVE_PATH, RULES_RELATIVE_PATH
from prompt_rules.rules.store import RuleStore, RuleStoreCache


@dataclass
class Settings:
    project_dir: Optional[Path] = None
    rules_file: Optional[Path] = None
    cache_dir: Optional[Path] = None
    strict: bool = True
    store_cache: RuleStoreCache = field(init=False)

    def __post_init__(self) -> None:
        self.store_cache = RuleStoreCache(strict=self.strict)

    def resolve_project_dir(self, hint: Optional[str] = None) -> Path:
        if self.project_dir is not None:
            return self.project_dir.expanduser().resolve()
        if hint:
            return Path(hint).expanduser().resolve()
        return Path.cwd().resolve()

    def rules_path(self, project_dir: Path) -> Path:
        if self.rules_file is not None:
            return self.rules_file.expanduser()
        return project_dir / RULES_RELATIVE_PATH

    def cache_path(self, project_dir: Path) -> Path:
        if self.cache_dir is not None:
            return self.cache_dir.expanduser()
        return project_dir / CACHE_RELATIVE_PATH

    def load_store(self, project_dir: Path) -> RuleStore:
        return self.store_cache.get(self.rules_path(project_dir))
