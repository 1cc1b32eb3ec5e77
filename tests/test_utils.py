import json
from pathlib import Path

from prompt_rules.utils import (
    compact_home_path,
    compact_home_paths_in_text,
    find_upwards,
    is_under,
    read_json_safe,
    relative_posix,
    write_json,
)


# --- read_json_safe ---


def test_read_json_safe_file_missing(tmp_path: Path) -> None:
    result, error = read_json_safe(tmp_path / "missing.json")

    assert result is None
    assert error is None


def test_read_json_safe_file_empty(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert error is None


def test_read_json_safe_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "invalid.json"
    path.write_text("{bad json", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert isinstance(error, str)


def test_write_json_creates_parents(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"

    write_json(path, {"key": "value"})

    assert json.loads(path.read_text(encoding="utf-8")) == {"key": "value"}
    assert path.read_text(encoding="utf-8").endswith("\n")


# --- is_under / relative_posix ---


def test_is_under_with_dotdot_resolving_under_root(tmp_path: Path) -> None:
    root = tmp_path / "root"
    (root / "sub").mkdir(parents=True)

    assert is_under(root / "sub" / ".." / "other", root) is True
    assert is_under(tmp_path / "outside", root) is False


def test_relative_posix_inside_and_outside(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()

    assert relative_posix(root / "a" / "b.py", root) == "a/b.py"
    assert relative_posix(tmp_path / "c.py", root) == (tmp_path / "c.py").resolve().as_posix()


# --- find_upwards ---


def test_find_upwards_nearest_wins(tmp_path: Path) -> None:
    (tmp_path / "tsconfig.json").write_text("{}", encoding="utf-8")
    nested = tmp_path / "pkg" / "src"
    nested.mkdir(parents=True)
    (tmp_path / "pkg" / "tsconfig.json").write_text("{}", encoding="utf-8")

    found = find_upwards(nested, ("tsconfig.json",))

    assert found == (tmp_path / "pkg" / "tsconfig.json").resolve()


def test_find_upwards_respects_stop_at(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    project = tmp_path / "project"
    nested = project / "a" / "b"
    nested.mkdir(parents=True)

    assert find_upwards(nested, ("pyproject.toml",), stop_at=project) is None
    assert find_upwards(nested, ("pyproject.toml",)) == (tmp_path / "pyproject.toml").resolve()


# --- compact_home_path ---


def test_compact_home_path_for_absolute_home_path(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(Path, "home", lambda: tmp_path)

    assert compact_home_path(tmp_path / ".claude" / "skills") == "~/.claude/skills"


def test_compact_home_paths_in_text_rewrites_embedded_paths(
    tmp_path: Path, monkeypatch
) -> None:
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    message = f"Missing rules file: {tmp_path / '.claude' / 'skills' / 'skill-rules.json'}"

    assert compact_home_paths_in_text(message) == "Missing rules file: ~/.claude/skills/skill-rules.json"
