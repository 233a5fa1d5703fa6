"""Shared builders and fixtures for laneboard tests."""

import asyncio

import pytest

from laneboard.backend import MemoryBackend
from laneboard.channel import LocalHub
from laneboard.model.board import Board, Column, Task


def make_board(layout, wip_limits=None, board_id="b1", name="Test Board"):
    """Build a normalized board from {column_id: [task_id, ...]}.

    Task titles are "Task <id>". Columns keep the dict's order.
    """
    wip_limits = wip_limits or {}
    columns = []
    tasks = {}
    for col_pos, (col_id, task_ids) in enumerate(layout.items()):
        for pos, task_id in enumerate(task_ids):
            tasks[task_id] = Task(id=task_id, title=f"Task {task_id}", column_id=col_id, position=pos)
        columns.append(
            Column(
                id=col_id,
                name=col_id.title(),
                position=col_pos,
                wip_limit=wip_limits.get(col_id, 0),
                task_ids=tuple(task_ids),
            )
        )
    return Board(id=board_id, name=name, columns=tuple(columns), tasks=tasks)


def layout_of(board):
    """The {column_id: [task_id, ...]} layout of a board."""
    return {col.id: list(col.task_ids) for col in board.columns}


async def settle(rounds=5):
    """Let scheduled callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FailingBackend(MemoryBackend):
    """MemoryBackend whose writes fail with the given error."""

    def __init__(self, *boards, error=None, **kwargs):
        super().__init__(*boards, **kwargs)
        self.error = error or RuntimeError("backend unavailable")

    async def move_task(self, task_id, dest_column_id, dest_index):
        await self._tick("move_task", task_id, dest_column_id, dest_index)
        raise self.error

    async def reorder_columns(self, board_id, ordered_column_ids):
        await self._tick("reorder_columns", board_id, tuple(ordered_column_ids))
        raise self.error

    async def update_column(self, column_id, patch):
        await self._tick("update_column", column_id, dict(patch))
        raise self.error

    async def create_column(self, board_id, column_id, name, wip_limit=0, index=None):
        await self._tick("create_column", board_id, column_id, name, wip_limit, index)
        raise self.error

    async def delete_column(self, column_id):
        await self._tick("delete_column", column_id)
        raise self.error


@pytest.fixture(autouse=True)
def git_identity(monkeypatch):
    """Give git a committer identity for plumbing commits."""
    for prefix in ("GIT_AUTHOR", "GIT_COMMITTER"):
        monkeypatch.setenv(f"{prefix}_NAME", "Test User")
        monkeypatch.setenv(f"{prefix}_EMAIL", "test@example.com")


@pytest.fixture
def board():
    """Three columns: todo [1, 2, 3], doing [4], done []."""
    return make_board({"todo": ["1", "2", "3"], "doing": ["4"], "done": []})


@pytest.fixture
def backend(board):
    return MemoryBackend(board)


@pytest.fixture
def hub():
    return LocalHub()
