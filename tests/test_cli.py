"""
Unit tests for the xit CLI (cli.py).
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from xit.cli import fmt_cmd, list_cmd, main, new_cmd, preview_cmd


# --- test fixtures ---

class Args:
    """Minimal args namespace for testing CLI functions."""
    def __init__(self, **kwargs):
        for k, v in kwargs.items():
            setattr(self, k, v)


SAMPLE = (
    "Work\n"
    "[ ] !! ship release -> 2024-05-01\n"
    "[x] done thing\n"
    "\n"
    "[@] read paper #reading\n"
)


@pytest.fixture
def todo(tmp_path):
    path = tmp_path / "todo.xit"
    path.write_text(SAMPLE, encoding='utf-8')
    return path


# ============================================================
# fmt
# ============================================================

class TestFmt:
    def test_prints_formatted(self, tmp_path, capsys):
        path = tmp_path / "messy.xit"
        path.write_text("[x]done\n\n\n[ ]   next  ", encoding='utf-8')
        fmt_cmd(Args(file=str(path), check=False, write=False))
        assert capsys.readouterr().out == "[x] done\n\n[ ] next\n"

    def test_check_formatted(self, todo, capsys):
        fmt_cmd(Args(file=str(todo), check=True, write=False))
        assert "already formatted" in capsys.readouterr().out

    def test_check_unformatted_exits(self, tmp_path):
        path = tmp_path / "messy.xit"
        path.write_text("[x]done", encoding='utf-8')
        with pytest.raises(SystemExit) as exc:
            fmt_cmd(Args(file=str(path), check=True, write=False))
        assert exc.value.code == 1

    def test_write(self, tmp_path, capsys):
        path = tmp_path / "messy.xit"
        path.write_text("Orphan\n\n[x]done", encoding='utf-8')
        fmt_cmd(Args(file=str(path), check=False, write=True))
        assert path.read_text(encoding='utf-8') == "[x] done\n"
        assert "Reformatted" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit):
            fmt_cmd(Args(file=str(tmp_path / "nope.xit"), check=False, write=False))


# ============================================================
# list
# ============================================================

class TestList:
    def _args(self, path, **overrides):
        defaults = dict(file=str(path), status=None, overdue=False, today="2024-06-01", json=False)
        defaults.update(overrides)
        return Args(**defaults)

    def test_text_output(self, todo, capsys):
        list_cmd(self._args(todo))
        out = capsys.readouterr().out
        assert "Work" in out
        assert "(untitled)" in out
        assert "  [ ] !! ship release -> 2024-05-01  (overdue)" in out
        assert "  [x] done thing" in out

    def test_status_filter(self, todo, capsys):
        list_cmd(self._args(todo, status="ongoing"))
        out = capsys.readouterr().out
        assert "read paper" in out
        assert "ship release" not in out

    def test_overdue_json(self, todo, capsys):
        list_cmd(self._args(todo, overdue=True, json=True))
        data = json.loads(capsys.readouterr().out)
        assert len(data) == 1
        assert data[0]["group"] == "Work"
        assert data[0]["priority"] == 2
        assert data[0]["due"] == "2024-05-01"
        assert data[0]["overdue"] is True

    def test_no_matches(self, todo, capsys):
        list_cmd(self._args(todo, status="obsolete"))
        assert "No matching items." in capsys.readouterr().out

    def test_each_group_gets_a_header(self, tmp_path, capsys):
        path = tmp_path / "split.xit"
        path.write_text("[ ] a\n\n[ ] b\n\nSame\n[ ] c\n\nSame\n[ ] d\n", encoding='utf-8')
        list_cmd(self._args(path))
        out = capsys.readouterr().out
        assert out == (
            "\n(untitled)\n  [ ] a\n"
            "\n(untitled)\n  [ ] b\n"
            "\nSame\n  [ ] c\n"
            "\nSame\n  [ ] d\n"
        )

    def test_bad_today(self, todo):
        with pytest.raises(SystemExit):
            list_cmd(self._args(todo, today="not-a-date"))


# ============================================================
# preview / new
# ============================================================

def test_preview(capsys):
    preview_cmd(Args(text="call #who='Ada' -> 2024-Q1", today="2024-06-01"))
    out = capsys.readouterr().out
    assert "Tags: #who=Ada" in out
    assert "Due: 2024-Q1 [quarter] (overdue)" in out


def test_preview_nothing(capsys):
    preview_cmd(Args(text="plain", today=None))
    out = capsys.readouterr().out
    assert "Tags: (none)" in out
    assert "Due: (none)" in out


def test_new_creates_starter(tmp_path, capsys):
    target = tmp_path / "dir" / "new.xit"
    new_cmd(Args(file=str(target), force=False))
    assert target.read_text(encoding='utf-8') == "My Tasks\n[ ] Your first task\n"


def test_new_refuses_existing(todo):
    with pytest.raises(SystemExit):
        new_cmd(Args(file=str(todo), force=False))


def test_new_force_overwrites(todo):
    new_cmd(Args(file=str(todo), force=True))
    assert todo.read_text(encoding='utf-8').startswith("My Tasks")


def test_main_dispatch(todo, capsys):
    main(["preview", "#a"])
    assert "Tags: #a" in capsys.readouterr().out


def test_main_without_command_exits():
    with pytest.raises(SystemExit):
        main([])
