"""Tests for 'laneboard board'."""

import json
from argparse import Namespace

import pytest

from laneboard.cli.board import board_summary


def test_board_summary(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=False)
    assert board_summary(args) == 0

    out = capsys.readouterr().out
    assert out.startswith("Test Board\n")
    assert "backlog" in out
    assert "2 tasks" in out


def test_board_summary_json(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=True)
    board_summary(args)

    data = json.loads(capsys.readouterr().out)
    assert data["id"] == "test-board"
    assert [c["id"] for c in data["columns"]] == ["backlog", "doing", "done"]
    assert data["columns"][0]["tasks"] == 2
    assert data["columns"][0]["wip_exceeded"] is False


def test_board_summary_without_board(empty_repo, capsys):
    args = Namespace(repo=str(empty_repo), json=True)
    with pytest.raises(SystemExit) as exc:
        board_summary(args)
    assert exc.value.code == 1
    assert "error" in json.loads(capsys.readouterr().err)


def test_board_summary_not_a_repo(tmp_path, capsys):
    args = Namespace(repo=str(tmp_path / "nowhere"), json=False)
    with pytest.raises(SystemExit):
        board_summary(args)
    assert "not a git repository" in capsys.readouterr().err
