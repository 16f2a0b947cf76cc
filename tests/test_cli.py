"""CLI integration tests for list operations."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from listmark.cli import main


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run each test from an empty directory so no config file is picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LISTMARK_LOG_LEVEL", raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


def test_renumber_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "1. a\n3. b\n5. c\n")
    assert main([str(f)]) == 0
    assert capsys.readouterr().out == "1. a\n2. b\n3. c\n"
    # Input is untouched without --inplace
    assert f.read_text() == "1. a\n3. b\n5. c\n"


def test_stdin_to_stdout(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("I. top\n  a. x\n  c. y\nIII. next\n"))
    assert main(["-"]) == 0
    assert capsys.readouterr().out == "I. top\n  a. x\n  b. y\nII. next\n"


def test_output_file(tmp_path: Path) -> None:
    f = _write(tmp_path / "in.md", "2. a\n2. b\n")
    out = tmp_path / "out" / "result.md"
    assert main(["-o", str(out), str(f)]) == 0
    assert out.read_text() == "2. a\n3. b\n"


def test_inplace(tmp_path: Path) -> None:
    f = _write(tmp_path / "notes.md", "1. a\n1. b\n")
    assert main(["--inplace", "--nobackup", str(f)]) == 0
    assert f.read_text() == "1. a\n2. b\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.md"]


def test_inplace_directory(tmp_path: Path) -> None:
    docs = tmp_path / "docs"
    docs.mkdir()
    a = _write(docs / "a.md", "1. x\n3. y\n")
    b = _write(docs / "b.txt", "a. x\nc. y\n")
    skipped = _write(docs / "c.py", "1. x\n3. y\n")
    assert main(["-i", "--nobackup", str(docs)]) == 0
    assert a.read_text() == "1. x\n2. y\n"
    assert b.read_text() == "a. x\nb. y\n"
    assert skipped.read_text() == "1. x\n3. y\n"


def test_toggle(tmp_path: Path) -> None:
    f = _write(tmp_path / "todo.md", "- [ ] project\n  - [ ] one\n  - [ ] two\n")
    assert main(["--toggle", "2", "-i", "--nobackup", str(f)]) == 0
    assert f.read_text() == "- [o] project\n  - [x] one\n  - [ ] two\n"


def test_toggle_without_nesting(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "todo.md", "- [ ] project\n  - [ ] one\n  - [ ] two\n")
    assert main(["--toggle", "2", "--no-nest", str(f)]) == 0
    assert capsys.readouterr().out == "- [ ] project\n  - [x] one\n  - [ ] two\n"


def test_demote_range(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "1. a\n2. b\n3. c\n4. d\n")
    assert main(["--demote", "2-3", str(f)]) == 0
    assert capsys.readouterr().out == "1. a\n  a. b\n  b. c\n2. d\n"


def test_promote(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "I. top\n  a. sub\n")
    assert main(["--promote", "2", str(f)]) == 0
    assert capsys.readouterr().out == "I. top\nII. sub\n"


def test_new_item(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "1. a\n2. b\n")
    assert main(["--new-item", "1", str(f)]) == 0
    assert capsys.readouterr().out == "1. a\n2. \n3. b\n"


def test_classify(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "h. item\ni. item\nplain\n- [x] done\n")
    assert main(["--classify", str(f)]) == 0
    assert capsys.readouterr().out == "1\tabc\th\n2\tabc\ti\n3\t-\n4\tchk\t-\n"


def test_no_effect_is_logged(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "1. a\n")
    assert main(["--promote", "1", str(f)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "1. a\n"
    assert "operation_had_no_effect" in captured.err


def test_verbose_logs_operations(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    f = _write(tmp_path / "notes.md", "1. a\n3. b\n")
    assert main(["-v", str(f)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "1. a\n2. b\n"
    assert "lines_renumbered" in captured.err


def test_config_file_settings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / ".listmark.toml", "[outline]\nshift-width = 4\n")
    f = _write(tmp_path / "notes.md", "1. a\n2. b\n")
    assert main(["--demote", "2", str(f)]) == 0
    assert capsys.readouterr().out == "1. a\n    a. b\n"


def test_explicit_flag_beats_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / ".listmark.toml", "shift-width = 4\n")
    f = _write(tmp_path / "notes.md", "1. a\n2. b\n")
    assert main(["--demote", "2", "--shift-width", "2", str(f)]) == 0
    assert capsys.readouterr().out == "1. a\n  a. b\n"


class TestErrors:
    """Errors are reported on stderr with a non-zero exit code."""

    def test_no_input(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        assert "No input specified" in capsys.readouterr().err

    def test_missing_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["missing.md"]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_line_past_end(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        f = _write(tmp_path / "todo.md", "- [ ] a\n- [ ] b\n")
        assert main(["--toggle", "9", str(f)]) == 1
        assert "past the end" in capsys.readouterr().err
        assert f.read_text() == "- [ ] a\n- [ ] b\n"

    def test_multiple_files_need_inplace(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        a = _write(tmp_path / "a.md", "1. a\n")
        b = _write(tmp_path / "b.md", "1. b\n")
        assert main([str(a), str(b)]) == 1
        assert "require --inplace" in capsys.readouterr().err

    def test_inplace_with_stdin(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-i", "-"]) == 1
        assert "stdin" in capsys.readouterr().err

    def test_invalid_outline_levels(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        f = _write(tmp_path / "notes.md", "1. a\n")
        assert main(["--outline-levels", "num,bogus", str(f)]) == 1
        assert "bogus" in capsys.readouterr().err

    def test_invalid_line_range(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--promote", "3-1", "notes.md"])
        assert exc.value.code == 2

    def test_actions_are_exclusive(self) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--toggle", "1", "--classify", "notes.md"])
        assert exc.value.code == 2


def test_classify_multiple_files(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    a = _write(tmp_path / "a.md", "1. a\n")
    b = _write(tmp_path / "b.md", "- [ ] b\n")
    assert main(["--classify", str(a), str(b)]) == 0
    assert capsys.readouterr().out == "1\tnum\t1\n1\tchk\t-\n"
