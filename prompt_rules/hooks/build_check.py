"""Format edited files and type-check their projects with external tools."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from prompt_rules.utils import find_upwards

logger = logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


class CheckStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    MISSING_TOOL = "missing_tool"


@dataclass(frozen=True)
class ToolSpec:
    """An external tool run for files with ``extensions``.

    ``command`` items may use ``{file}`` and ``{project}``; the tool only runs
    when one of ``markers`` is found walking up from the file. Per-project
    tools run once for each directory holding a marker.
    """

    name: str
    extensions: tuple[str, ...]
    markers: tuple[str, ...]
    command: tuple[str, ...]
    per_project: bool = False


DEFAULT_TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="prettier",
        extensions=(".js", ".jsx", ".ts", ".tsx", ".css", ".json"),
        markers=(
            ".prettierrc",
            ".prettierrc.json",
            ".prettierrc.js",
            ".prettierrc.yaml",
            ".prettierrc.yml",
            "prettier.config.js",
        ),
        command=("npx", "prettier", "--write", "{file}"),
    ),
    ToolSpec(
        name="black",
        extensions=(".py",),
        markers=("pyproject.toml",),
        command=("black", "--quiet", "{file}"),
    ),
    ToolSpec(
        name="tsc",
        extensions=(".ts", ".tsx"),
        markers=("tsconfig.json",),
        command=("npx", "tsc", "--noEmit", "-p", "{project}"),
        per_project=True,
    ),
)


@dataclass
class CheckResult:
    tool: str
    target: str
    status: CheckStatus
    returncode: Optional[int] = None
    output: str = ""

    @property
    def failed(self) -> bool:
        return self.status != CheckStatus.OK


@dataclass
class CheckReport:
    results: list[CheckResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def failures(self) -> list[CheckResult]:
        return [result for result in self.results if result.failed]

    def is_ok(self) -> bool:
        return not self.failures


class BuildChecker:
    def __init__(
        self,
        project_dir: Path,
        tools: Sequence[ToolSpec] = DEFAULT_TOOLS,
        runner: Runner = subprocess.run,
    ) -> None:
        self.project_dir = project_dir
        self.tools = tuple(tools)
        self._runner = runner

    def check(self, files: Iterable[Path]) -> CheckReport:
        report = CheckReport()
        checked_projects: set[tuple[str, Path]] = set()

        for path in files:
            if not path.is_file():
                report.skipped.append(f"{path}: no longer exists")
                continue
            tools = [tool for tool in self.tools if path.suffix.lower() in tool.extensions]
            if not tools:
                report.skipped.append(f"{path}: no tool for '{path.suffix}' files")
                continue

            for tool in tools:
                marker = find_upwards(path.parent, tool.markers, stop_at=self.project_dir)
                if marker is None:
                    report.skipped.append(f"{path}: no {tool.name} config found")
                    continue
                project = marker.parent
                if tool.per_project:
                    key = (tool.name, project)
                    if key in checked_projects:
                        continue
                    checked_projects.add(key)
                    target = str(project)
                else:
                    target = str(path)
                report.results.append(self._run_tool(tool, path, project, target))

        return report

    def _run_tool(self, tool: ToolSpec, path: Path, project: Path, target: str) -> CheckResult:
        command = [item.format(file=str(path), project=str(project)) for item in tool.command]
        logger.debug("Running %s in %s", " ".join(command), project)
        try:
            completed = self._runner(
                command,
                cwd=str(project),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            logger.warning("%s could not be started: %s", tool.name, exc)
            missing = isinstance(exc, FileNotFoundError)
            return CheckResult(
                tool=tool.name,
                target=target,
                status=CheckStatus.MISSING_TOOL if missing else CheckStatus.FAILED,
                output=str(exc),
            )

        output = "\n".join(
            part.strip() for part in (completed.stdout, completed.stderr) if part and part.strip()
        )
        status = CheckStatus.OK if completed.returncode == 0 else CheckStatus.FAILED
        if status == CheckStatus.FAILED:
            logger.warning("%s failed for %s (exit %s)", tool.name, target, completed.returncode)
        return CheckResult(
            tool=tool.name,
            target=target,
            status=status,
            returncode=completed.returncode,
            output=output,
        )
