import sys
import json
import logging
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    for name in (
        "CLAUDE_PROJECT_DIR",
        "PROMPT_RULES_FILE",
        "PROMPT_RULES_CACHE_DIR",
        "PROMPT_RULES_LENIENT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("prompt_rules")
    package_logger.handlers = []
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def rules_document() -> dict[str, Any]:
    return {
        "version": "1.0",
        "skills": {
            "backend-dev-guidelines": {
                "type": "domain",
                "enforcement": "suggest",
                "priority": "high",
                "description": "Backend conventions",
                "payload": "Read the backend guidelines skill.",
                "promptTriggers": {
                    "keywords": ["activerecord", "model", "controller"],
                    "intentPatterns": [r"(create|add).*?(route|endpoint)"],
                },
                "fileTriggers": {
                    "pathPatterns": ["app/**/*.rb"],
                    "pathExclusions": ["**/*_spec.rb"],
                    "contentPatterns": [r"ActiveRecord::Base"],
                },
            },
            "database-verification": {
                "type": "guardrail",
                "enforcement": "block",
                "priority": "high",
                "payload": "Verify column names against the schema before writing queries.",
                "promptTriggers": {"keywords": ["migration", "schema"]},
                "fileTriggers": {"pathPatterns": ["db/**/*.rb"]},
                "skipConditions": {
                    "fileMarkers": ["@skip-validation"],
                    "envOverride": "SKIP_DB_VERIFICATION",
                },
            },
            "frontend-dev-guidelines": {
                "type": "domain",
                "enforcement": "suggest",
                "priority": "low",
                "payload": "Use the frontend guidelines skill.",
                "promptTriggers": {"keywords": ["component", "react"]},
                "fileTriggers": {"pathPatterns": ["**/*.tsx"]},
            },
        },
    }


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def rules_file(project_dir: Path, rules_document: dict[str, Any], write_json) -> Path:
    path = project_dir / ".claude" / "skills" / "skill-rules.json"
    write_json(path, rules_document)
    return path


@pytest.fixture
def cli_runner(project_dir: Path) -> CliRunner:
    class ProjectCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("CLAUDE_PROJECT_DIR", str(project_dir))
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return ProjectCliRunner()
