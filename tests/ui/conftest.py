"""Fixtures for UI tests."""

import pytest

from laneboard.backend import MemoryBackend
from laneboard.ui.app import LaneboardApp
from laneboard.ui.board import ColumnWidget, TaskCard

from ..conftest import make_board


@pytest.fixture
def limited_board():
    """todo [1, 2], doing [3, 4] with a WIP limit of 2 on doing."""
    return make_board({"todo": ["1", "2"], "doing": ["3", "4"]}, wip_limits={"doing": 2})


@pytest.fixture
def app(board):
    return LaneboardApp(backend=MemoryBackend(board), board_id="b1", client_id="me")


def card(screen, task_id) -> TaskCard:
    return next(c for c in screen.query(TaskCard) if c.task_id == task_id)


def column(screen, column_id) -> ColumnWidget:
    return next(c for c in screen.query(ColumnWidget) if c.column_id == column_id)


def column_tasks(screen):
    """The task ids shown in each column, in display order."""
    return {col.column_id: [c.task_id for c in col.query(TaskCard)] for col in screen.query(ColumnWidget)}
