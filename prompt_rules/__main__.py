import os
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from prompt_rules.constants import (
    CACHE_DIR_ENV,
    EDIT_TOOL_NAMES,
    LENIENT_ENV,
    PROJECT_DIR_ENV,
    RULES_FILE_ENV,
)
from prompt_rules.errors import PromptRulesError
from prompt_rules.hooks.build_check import BuildChecker
from prompt_rules.hooks.payloads import (
    hook_output,
    parse_prompt_input,
    parse_session_id,
    parse_tool_input,
)
from prompt_rules.hooks.tracker import SessionTracker, read_snapshot
from prompt_rules.logs import configure_logging
from prompt_rules.rules.augmenter import PromptAugmenter
from prompt_rules.rules.matcher import RuleMatcher
from prompt_rules.rules.models import EditedFile, MatchContext, MatchReport
from prompt_rules.settings import Settings
from prompt_rules.tui import RulesConsoleUI
from prompt_rules.utils import relative_posix


def _read_stdin() -> str:
    return click.get_text_stream("stdin").read()


def _match(
    settings: Settings,
    project_dir: Path,
    prompt: str,
    edited_files: list[EditedFile],
    activated: frozenset[str],
) -> MatchReport:
    try:
        store = settings.load_store(project_dir)
    except PromptRulesError as exc:
        raise click.ClickException(str(exc))
    context = MatchContext(
        prompt=prompt,
        edited_files=tuple(edited_files),
        activated=activated,
        environ=dict(os.environ),
    )
    return RuleMatcher(store).match(context)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--project-dir",
    envvar=PROJECT_DIR_ENV,
    type=click.Path(file_okay=False, path_type=Path),
    help="Project root (defaults to the hook's cwd, then the current directory).",
)
@click.option(
    "--rules",
    "rules_file",
    envvar=RULES_FILE_ENV,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Rules document (JSON or YAML).",
)
@click.option(
    "--cache-dir",
    envvar=CACHE_DIR_ENV,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for per-session state.",
)
@click.option(
    "--lenient",
    envvar=LENIENT_ENV,
    is_flag=True,
    help="Defer invalid patterns to match time instead of rejecting the rules file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    project_dir: Optional[Path],
    rules_file: Optional[Path],
    cache_dir: Optional[Path],
    lenient: bool,
    verbose: bool,
) -> None:
    """Prompt rule matching hooks for AI coding assistants."""
    configure_logging(verbose)
    ctx.obj = Settings(
        project_dir=project_dir,
        rules_file=rules_file,
        cache_dir=cache_dir,
        strict=not lenient,
    )


@cli.command(help="Augment a prompt with the guidance of matching rules.")
@click.option("--text", "text", default=None, help="Prompt text; hook JSON is read from stdin otherwise.")
@click.option("--session-id", default=None, help="Session whose edited files are considered.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "hook"], case_sensitive=False),
    default="text",
    show_default=True,
)
@click.option(
    "--position",
    type=click.Choice(["prepend", "append"], case_sensitive=False),
    default="prepend",
    show_default=True,
)
@click.pass_obj
def prompt(
    settings: Settings,
    text: Optional[str],
    session_id: Optional[str],
    output_format: str,
    position: str,
) -> None:
    cwd_hint: Optional[str] = None
    if text is None:
        try:
            hook_input = parse_prompt_input(_read_stdin())
        except PromptRulesError as exc:
            raise click.ClickException(str(exc))
        text = hook_input.prompt
        session_id = session_id or hook_input.session_id
        cwd_hint = hook_input.cwd

    project_dir = settings.resolve_project_dir(cwd_hint)
    tracker = SessionTracker(settings.cache_path(project_dir))
    edited_files: list[EditedFile] = []
    activated: frozenset[str] = frozenset()
    if session_id:
        edited_files = tracker.edited_files(session_id, project_dir)
        activated = tracker.activated(session_id)

    report = _match(settings, project_dir, text, edited_files, activated)
    augmenter = PromptAugmenter(position=position.lower())

    block = augmenter.render_safe(report.results)
    if session_id and block:
        tracker.record_activation(session_id, report.matched_ids)

    if output_format.lower() == "hook":
        if block:
            click.echo(hook_output(block))
        return
    click.echo(augmenter.inject(text, block), nl=False)


@cli.command(help="Dry-run a prompt against the rules and show the ranked matches.")
@click.argument("text")
@click.option(
    "--file",
    "files",
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Treat this file as edited in the session (repeatable).",
)
@click.option("--session-id", default=None, help="Include the session's edited files.")
@click.pass_obj
def match(
    settings: Settings, text: str, files: tuple[Path, ...], session_id: Optional[str]
) -> None:
    ui = RulesConsoleUI(Console())
    project_dir = settings.resolve_project_dir()
    edited_files: list[EditedFile] = []
    activated: frozenset[str] = frozenset()
    if session_id:
        tracker = SessionTracker(settings.cache_path(project_dir))
        edited_files = tracker.edited_files(session_id, project_dir)
        activated = tracker.activated(session_id)
    for path in files:
        absolute = path if path.is_absolute() else project_dir / path
        edited_files.append(
            EditedFile(
                path=relative_posix(absolute, project_dir),
                content_snapshot=read_snapshot(absolute),
            )
        )

    report = _match(settings, project_dir, text, edited_files, activated)
    ui.render_match(report, augmented=PromptAugmenter().augment(text, report.results))

    if report.errors:
        raise click.exceptions.Exit(1)


@cli.command(help="Load and validate the rules document.")
@click.pass_obj
def validate(settings: Settings) -> None:
    ui = RulesConsoleUI(Console())
    project_dir = settings.resolve_project_dir()
    try:
        store = settings.load_store(project_dir)
    except PromptRulesError as exc:
        raise click.ClickException(str(exc))
    ui.render_rules(store.rules(), str(settings.rules_path(project_dir)))


@cli.command(help="Record files edited by a tool call (hook JSON on stdin).")
@click.pass_obj
def track(settings: Settings) -> None:
    try:
        tool_input = parse_tool_input(_read_stdin())
    except PromptRulesError as exc:
        raise click.ClickException(str(exc))
    if tool_input.tool_name not in EDIT_TOOL_NAMES or not tool_input.file_paths:
        return

    project_dir = settings.resolve_project_dir(tool_input.cwd)
    tracker = SessionTracker(settings.cache_path(project_dir))
    for raw_path in tool_input.file_paths:
        path = Path(raw_path)
        if not path.is_absolute():
            path = project_dir / path
        tracker.record_edit(tool_input.session_id, path, project_dir)


@cli.command(help="Format edited files and type-check their projects.")
@click.argument("paths", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--session-id", default=None, help="Check the files edited in this session.")
@click.option("--clear", is_flag=True, help="Forget the session's edits after checking.")
@click.pass_obj
def check(
    settings: Settings,
    paths: tuple[Path, ...],
    session_id: Optional[str],
    clear: bool,
) -> None:
    ui = RulesConsoleUI(Console())
    project_dir = settings.resolve_project_dir()
    tracker = SessionTracker(settings.cache_path(project_dir))

    if not paths and session_id is None:
        raw = _read_stdin()
        try:
            session_id = parse_session_id(raw) if raw.strip() else ""
        except PromptRulesError as exc:
            raise click.ClickException(str(exc))

    if paths:
        files = [path if path.is_absolute() else project_dir / path for path in paths]
    else:
        files = [project_dir / entry for entry in tracker.edited_paths(session_id or "")]

    report = BuildChecker(project_dir).check(files)
    ui.render_check(report)

    if clear and session_id:
        tracker.clear(session_id)
    if not report.is_ok():
        raise click.exceptions.Exit(1)


def main() -> int:
    try:
        result = cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
