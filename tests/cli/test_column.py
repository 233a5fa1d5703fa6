"""Tests for 'laneboard column' commands."""

import json
from argparse import Namespace

import pytest

from laneboard.cli.column import column_add, column_limit, column_list, column_move, column_remove
from laneboard.git import read_board


def test_column_list(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=False)
    assert column_list(args) == 0

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert lines[0].startswith("backlog")
    assert "2 tasks" in lines[0]


def test_column_list_json(initialized_repo, capsys):
    column_list(Namespace(repo=str(initialized_repo), json=True))
    data = json.loads(capsys.readouterr().out)
    assert [c["name"] for c in data] == ["Backlog", "Doing", "Done"]
    assert [c["position"] for c in data] == [0, 1, 2]


def test_column_add(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=True, name="Review", wip_limit=3)
    assert column_add(args) == 0

    data = json.loads(capsys.readouterr().out)
    assert data == {"id": "review", "name": "Review", "position": 4, "wip_limit": 3}
    assert read_board(initialized_repo).column("review").wip_limit == 3


def test_column_add_negative_limit(initialized_repo):
    args = Namespace(repo=str(initialized_repo), json=False, name="Bad", wip_limit=-1)
    with pytest.raises(SystemExit):
        column_add(args)


def test_column_move(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=True, id="done", position=1)
    assert column_move(args) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["order"] == ["done", "backlog", "doing"]
    assert data["position"] == 1
    assert [c.id for c in read_board(initialized_repo).columns] == ["done", "backlog", "doing"]


def test_column_move_clamps_position(initialized_repo):
    args = Namespace(repo=str(initialized_repo), json=False, id="backlog", position=99)
    column_move(args)
    assert [c.id for c in read_board(initialized_repo).columns] == ["doing", "done", "backlog"]


def test_column_limit(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=True, id="backlog", limit=1)
    assert column_limit(args) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["wip_limit"] == 1
    assert data["wip_exceeded"] is True
    assert read_board(initialized_repo).column("backlog").wip_limit == 1


def test_column_limit_clear(initialized_repo, capsys):
    column_limit(Namespace(repo=str(initialized_repo), json=False, id="backlog", limit=1))
    column_limit(Namespace(repo=str(initialized_repo), json=False, id="backlog", limit=0))
    assert read_board(initialized_repo).column("backlog").wip_limit == 0


def test_column_limit_negative(initialized_repo, capsys):
    with pytest.raises(SystemExit):
        column_limit(Namespace(repo=str(initialized_repo), json=False, id="backlog", limit=-2))
    assert "non-negative" in capsys.readouterr().err


def test_column_remove(initialized_repo, capsys):
    args = Namespace(repo=str(initialized_repo), json=True, id="done")
    assert column_remove(args) == 0

    data = json.loads(capsys.readouterr().out)
    assert data == {"id": "done", "name": "Done", "order": ["backlog", "doing"]}
    assert [c.id for c in read_board(initialized_repo).columns] == ["backlog", "doing"]


def test_column_remove_with_tasks(initialized_repo, capsys):
    with pytest.raises(SystemExit):
        column_remove(Namespace(repo=str(initialized_repo), json=False, id="backlog"))
    assert "still has 2 tasks" in capsys.readouterr().err
    assert read_board(initialized_repo).has_column("backlog")


def test_column_remove_unknown(initialized_repo):
    with pytest.raises(SystemExit):
        column_remove(Namespace(repo=str(initialized_repo), json=False, id="nope"))
