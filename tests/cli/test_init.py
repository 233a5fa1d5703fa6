"""Tests for 'laneboard init'."""

import json
from argparse import Namespace

from laneboard.cli.init import init_board
from laneboard.git import has_branch, is_git_repo, read_board


def test_init_creates_board(empty_repo, capsys):
    args = Namespace(repo=str(empty_repo), json=False, name="Roadmap")
    assert init_board(args) == 0

    out = capsys.readouterr().out
    assert "Initialized laneboard board roadmap" in out
    board = read_board(empty_repo)
    assert board.name == "Roadmap"
    assert [c.name for c in board.columns] == ["Backlog", "Doing", "Done"]


def test_init_defaults_name_to_directory(empty_repo):
    args = Namespace(repo=str(empty_repo), json=False, name=None)
    init_board(args)
    assert read_board(empty_repo).name == empty_repo.name


def test_init_creates_repo(tmp_path):
    path = tmp_path / "fresh"
    path.mkdir()
    args = Namespace(repo=str(path), json=False, name="Fresh")
    assert init_board(args) == 0
    assert is_git_repo(path)
    assert has_branch(path)


def test_init_twice_keeps_board(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=True, name="Other")
    assert init_board(args) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["created"] is False
    assert data["board"] == "test-board"
    assert read_board(initialized_repo).name == "Test Board"


def test_init_json(empty_repo, capsys):
    args = Namespace(repo=str(empty_repo), json=True, name="Roadmap")
    init_board(args)
    data = json.loads(capsys.readouterr().out)
    assert data == {
        "repo_path": str(empty_repo.resolve()),
        "board": "roadmap",
        "columns": ["Backlog", "Doing", "Done"],
        "created": True,
    }
