"""Tests for resolving paths into the files to process."""

from __future__ import annotations

from pathlib import Path

import pytest

from listmark.config import DEFAULT_FILE_TYPES
from listmark.file_discovery import FileDiscovery


def _names(paths: list[Path], root: Path) -> list[str]:
    return [p.relative_to(root.resolve()).as_posix() for p in paths]


def test_walks_directories_with_file_types(tmp_path: Path) -> None:
    (tmp_path / "a.md").write_text("")
    (tmp_path / "b.txt").write_text("")
    (tmp_path / "c.py").write_text("")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "d.markdown").write_text("")
    (sub / "COMMIT_EDITMSG").write_text("")
    result = FileDiscovery(DEFAULT_FILE_TYPES).resolve([tmp_path])
    assert _names(result, tmp_path) == ["a.md", "b.txt", "sub/COMMIT_EDITMSG", "sub/d.markdown"]


def test_excluded_directories_pruned(tmp_path: Path) -> None:
    for name in ("node_modules", ".git", "build"):
        excluded = tmp_path / name
        excluded.mkdir()
        (excluded / "x.md").write_text("")
    (tmp_path / "keep.md").write_text("")
    result = FileDiscovery(DEFAULT_FILE_TYPES).resolve([tmp_path])
    assert _names(result, tmp_path) == ["keep.md"]


def test_custom_excludes(tmp_path: Path) -> None:
    drafts = tmp_path / "drafts"
    drafts.mkdir()
    (drafts / "wip.md").write_text("")
    (tmp_path / "done.md").write_text("")
    (tmp_path / "skip.md").write_text("")
    result = FileDiscovery(["*.md"], excludes=["drafts/", "skip.md"]).resolve([tmp_path])
    assert _names(result, tmp_path) == ["done.md"]


def test_explicit_files_always_kept(tmp_path: Path) -> None:
    script = tmp_path / "script.py"
    script.write_text("")
    result = FileDiscovery(["*.md"]).resolve([script])
    assert result == [script.resolve()]


def test_duplicates_removed(tmp_path: Path) -> None:
    f = tmp_path / "a.md"
    f.write_text("")
    result = FileDiscovery(["*.md"]).resolve([f, tmp_path])
    assert result == [f.resolve()]


def test_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileDiscovery(["*.md"]).resolve([tmp_path / "missing"])
