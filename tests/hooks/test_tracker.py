from pathlib import Path

from prompt_rules.hooks.tracker import SessionTracker, read_snapshot


def test_record_and_list_edits(tmp_path: Path, project_dir: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")
    model = project_dir / "app" / "models" / "post.rb"
    model.parent.mkdir(parents=True)
    model.write_text("class Post < ActiveRecord::Base\nend\n", encoding="utf-8")

    assert tracker.record_edit("s1", model, project_dir) is True
    assert tracker.record_edit("s1", model, project_dir) is False

    files = tracker.edited_files("s1", project_dir)
    assert [item.path for item in files] == ["app/models/post.rb"]
    assert files[0].content_snapshot is not None
    assert "ActiveRecord::Base" in files[0].content_snapshot


def test_sessions_are_isolated(tmp_path: Path, project_dir: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")
    tracker.record_edit("s1", project_dir / "a.py", project_dir)

    assert tracker.edited_paths("s2") == []
    assert tracker.edited_paths("s1") == ["a.py"]


def test_deleted_files_have_no_snapshot(tmp_path: Path, project_dir: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")
    tracker.record_edit("s1", project_dir / "gone.py", project_dir)

    files = tracker.edited_files("s1", project_dir)

    assert files[0].path == "gone.py"
    assert files[0].content_snapshot is None


def test_paths_outside_project_stay_absolute(tmp_path: Path, project_dir: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")
    outside = tmp_path / "elsewhere" / "x.py"

    tracker.record_edit("s1", outside, project_dir)

    assert tracker.edited_paths("s1") == [outside.resolve().as_posix()]


def test_activation_is_recorded_once(tmp_path: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")

    tracker.record_activation("s1", ["a", "b"])
    tracker.record_activation("s1", ["b", "c"])

    assert tracker.activated("s1") == {"a", "b", "c"}
    assert tracker.load_state("s1")["activated"] == ["a", "b", "c"]


def test_corrupt_state_reads_as_empty(tmp_path: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")
    path = tracker.state_path("s1")
    path.parent.mkdir(parents=True)
    path.write_text("{corrupt", encoding="utf-8")

    assert tracker.edited_paths("s1") == []
    assert tracker.activated("s1") == frozenset()


def test_state_path_is_sanitized(tmp_path: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")

    assert tracker.state_path("../../etc/passwd").parent == tmp_path / "cache"
    assert tracker.state_path("").name == "default.json"


def test_clear(tmp_path: Path, project_dir: Path) -> None:
    tracker = SessionTracker(tmp_path / "cache")
    tracker.record_edit("s1", project_dir / "a.py", project_dir)

    assert tracker.clear("s1") is True
    assert tracker.clear("s1") is False
    assert tracker.edited_paths("s1") == []


def test_read_snapshot_limits(tmp_path: Path) -> None:
    big = tmp_path / "big.txt"
    big.write_text("x" * 32, encoding="utf-8")
    binary = tmp_path / "blob.bin"
    binary.write_bytes(b"\xff\xfe\x00\x81")

    assert read_snapshot(big, limit=16) is None
    assert read_snapshot(big) == "x" * 32
    assert read_snapshot(binary) is None
    assert read_snapshot(tmp_path) is None
