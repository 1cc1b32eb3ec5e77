import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_safe(path: Path) -> tuple[Any | None, str | None]:
    if not path.exists():
        return None, None
    if path.stat().st_size == 0:
        return None, None
    try:
        return read_json(path), None
    except (OSError, ValueError) as exc:
        return None, str(exc)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=False)
        handle.write("\n")


def is_under(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except (OSError, ValueError):
        return False


def relative_posix(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when it lives under it, else absolute."""
    resolved = path.resolve()
    if is_under(resolved, root):
        return resolved.relative_to(root.resolve()).as_posix()
    return resolved.as_posix()


def find_upwards(
    start: Path, names: tuple[str, ...], stop_at: Optional[Path] = None
) -> Optional[Path]:
    """Walk from ``start`` towards the filesystem root looking for any of ``names``.

    The walk stops after checking ``stop_at`` when it is an ancestor of ``start``.
    """
    current = start.resolve()
    boundary = stop_at.resolve() if stop_at is not None else None
    while True:
        for name in names:
            candidate = current / name
            if candidate.exists():
                return candidate
        if boundary is not None and current == boundary:
            return None
        if current.parent == current:
            return None
        current = current.parent


def compact_home_path(path: str | Path) -> str:
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    home_prefix = f"{home}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def compact_home_paths_in_text(text: str) -> str:
    home = str(Path.home())
    if text == home:
        return "~"
    return text.replace(f"{home}/", "~/")
