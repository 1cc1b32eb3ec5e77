"""Per-session record of edited files and activated rules."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterable, Optional

from prompt_rules.constants import MAX_SNAPSHOT_BYTES
from prompt_rules.rules.models import EditedFile
from prompt_rules.utils import now_iso, read_json_safe, relative_posix, write_json

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")
_DEFAULT_SESSION = "default"


def _empty_state() -> dict[str, Any]:
    return {"edited_files": [], "activated": [], "updated_at": None}


class SessionTracker:
    def __init__(self, cache_dir: Path) -> None:
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def state_path(self, session_id: str) -> Path:
        name = _UNSAFE_CHARS_RE.sub("_", session_id) or _DEFAULT_SESSION
        return self._cache_dir / f"{name}.json"

    def load_state(self, session_id: str) -> dict[str, Any]:
        path = self.state_path(session_id)
        payload, error = read_json_safe(path)
        if error is not None:
            logger.warning("Ignoring unreadable session state %s: %s", path, error)
        if not isinstance(payload, dict):
            return _empty_state()
        state = _empty_state()
        for key in ("edited_files", "activated"):
            value = payload.get(key)
            if isinstance(value, list):
                state[key] = [item for item in value if isinstance(item, str)]
        state["updated_at"] = payload.get("updated_at")
        return state

    def _save_state(self, session_id: str, state: dict[str, Any]) -> None:
        state["updated_at"] = now_iso()
        write_json(self.state_path(session_id), state)

    def record_edit(self, session_id: str, path: Path, project_dir: Path) -> bool:
        """Remember ``path`` as edited; returns False if it was already known."""
        entry = relative_posix(path, project_dir)
        state = self.load_state(session_id)
        if entry in state["edited_files"]:
            return False
        state["edited_files"].append(entry)
        self._save_state(session_id, state)
        return True

    def record_activation(self, session_id: str, rule_ids: Iterable[str]) -> None:
        state = self.load_state(session_id)
        new_ids = [item for item in rule_ids if item not in state["activated"]]
        if not new_ids:
            return
        state["activated"].extend(new_ids)
        self._save_state(session_id, state)

    def activated(self, session_id: str) -> frozenset[str]:
        return frozenset(self.load_state(session_id)["activated"])

    def edited_paths(self, session_id: str) -> list[str]:
        return list(self.load_state(session_id)["edited_files"])

    def edited_files(
        self, session_id: str, project_dir: Path, read_content: bool = True
    ) -> list[EditedFile]:
        files: list[EditedFile] = []
        for entry in self.edited_paths(session_id):
            snapshot = read_snapshot(project_dir / entry) if read_content else None
            files.append(EditedFile(path=entry, content_snapshot=snapshot))
        return files

    def clear(self, session_id: str) -> bool:
        path = self.state_path(session_id)
        if not path.exists():
            return False
        path.unlink()
        return True


def read_snapshot(path: Path, limit: int = MAX_SNAPSHOT_BYTES) -> Optional[str]:
    """File text for content matching, or None when missing, too large or binary."""
    try:
        if not path.is_file() or path.stat().st_size > limit:
            return None
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None
