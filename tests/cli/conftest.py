"""Shared fixtures for CLI tests."""

import pytest
from git import Repo

from laneboard.git import write_board
from laneboard.model.column import new_board
from laneboard.model.task import add_task


@pytest.fixture
def empty_repo(tmp_path):
    """Create an empty git repo."""
    repo = Repo.init(tmp_path)
    (tmp_path / ".gitkeep").write_text("")
    repo.index.add([".gitkeep"])
    repo.index.commit("Initial commit")
    return tmp_path


@pytest.fixture
def initialized_repo(empty_repo):
    """Create a repo with a board: Backlog [1, 2], Doing [], Done []."""
    board = new_board("Test Board")
    _, board = add_task(board, "First task")
    _, board = add_task(board, "Second task")
    write_board(empty_repo, board, "Initialize test board")
    return empty_repo
