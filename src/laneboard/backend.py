"""Persistence backend interface and an in-memory implementation.

The engine only talks to the ``Backend`` protocol. The board-side
functions below are what a backend does on receipt of each call; both
``MemoryBackend`` and ``laneboard.git.GitBackend`` apply them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, Sequence

from laneboard.errors import BoardNotFoundError, InvalidMoveError, PersistenceError
from laneboard.model.board import Board, Column, Kind, Task
from laneboard.model.column import add_column, remove_column, rename_column, set_wip_limit
from laneboard.model.position import reindex
from laneboard.model.reorder import apply_move, locate_move

logger = logging.getLogger(__name__)

COLUMN_PATCH_KEYS = {"name", "wip_limit"}


class Backend(Protocol):
    async def fetch_board(self, board_id: str) -> Board: ...

    async def move_task(self, task_id: str, dest_column_id: str, dest_index: int) -> Task: ...

    async def reorder_columns(self, board_id: str, ordered_column_ids: Sequence[str]) -> None: ...

    async def update_column(self, column_id: str, patch: dict[str, Any]) -> Column: ...

    async def create_column(
        self, board_id: str, column_id: str, name: str, wip_limit: int = 0, index: int | None = None
    ) -> Column: ...

    async def delete_column(self, column_id: str) -> None: ...


# --- Board-side handlers ---


def move_task_on(board: Board, task_id: str, dest_column_id: str, dest_index: int) -> Board:
    """Apply a persisted task move. Indices past the end append."""
    try:
        move = locate_move(board, Kind.TASK, task_id, dest_column_id, dest_index)
        return apply_move(board, move)
    except InvalidMoveError as exc:
        raise PersistenceError(str(exc)) from exc


def reorder_columns_on(board: Board, ordered_column_ids: Sequence[str]) -> Board:
    """Put columns in the given order. The ids must match the board's exactly."""
    ordered_column_ids = list(ordered_column_ids)
    current = {col.id: col for col in board.columns}
    if sorted(ordered_column_ids) != sorted(current):
        raise PersistenceError("column order does not match the board's columns")
    return board.with_columns(reindex([current[cid] for cid in ordered_column_ids]))


def update_column_on(board: Board, column_id: str, patch: dict[str, Any]) -> Board:
    """Apply a partial column update (name and/or wip_limit)."""
    unknown = set(patch) - COLUMN_PATCH_KEYS
    if unknown:
        raise PersistenceError(f"cannot update column fields: {', '.join(sorted(unknown))}")
    if not board.has_column(column_id):
        raise PersistenceError(f"unknown column {column_id!r}")
    try:
        if "wip_limit" in patch:
            board = set_wip_limit(board, column_id, patch["wip_limit"])
        if "name" in patch:
            board = rename_column(board, column_id, str(patch["name"]))
    except ValueError as exc:
        raise PersistenceError(str(exc)) from exc
    return board


def create_column_on(board: Board, column_id: str, name: str, wip_limit: int = 0, index: int | None = None) -> Board:
    try:
        return add_column(board, name, wip_limit, column_id=column_id, index=index)
    except ValueError as exc:
        raise PersistenceError(str(exc)) from exc


def delete_column_on(board: Board, column_id: str) -> Board:
    """Remove a column. Columns that still hold tasks are refused."""
    if not board.has_column(column_id):
        raise PersistenceError(f"unknown column {column_id!r}")
    try:
        return remove_column(board, column_id)
    except ValueError as exc:
        raise PersistenceError(str(exc)) from exc


# --- In-memory backend ---


class MemoryBackend:
    """Keeps boards in a dict. Useful for tests and single-process demos.

    ``latency`` adds an artificial delay to every call so in-flight
    behaviour can be observed.
    """

    def __init__(self, *boards: Board, latency: float = 0.0) -> None:
        self.boards: dict[str, Board] = {board.id: board for board in boards}
        self.latency = latency
        self.calls: list[tuple[str, tuple]] = []

    async def _tick(self, name: str, *args) -> None:
        self.calls.append((name, args))
        if self.latency:
            await asyncio.sleep(self.latency)

    def _board(self, board_id: str) -> Board:
        try:
            return self.boards[board_id]
        except KeyError:
            raise BoardNotFoundError(f"board {board_id!r} not found") from None

    def _board_with_task(self, task_id: str) -> Board:
        for board in self.boards.values():
            if task_id in board.tasks:
                return board
        raise PersistenceError(f"task {task_id!r} not found")

    def _board_with_column(self, column_id: str) -> Board:
        for board in self.boards.values():
            if board.has_column(column_id):
                return board
        raise PersistenceError(f"column {column_id!r} not found")

    async def fetch_board(self, board_id: str) -> Board:
        await self._tick("fetch_board", board_id)
        return self._board(board_id)

    async def move_task(self, task_id: str, dest_column_id: str, dest_index: int) -> Task:
        await self._tick("move_task", task_id, dest_column_id, dest_index)
        board = move_task_on(self._board_with_task(task_id), task_id, dest_column_id, dest_index)
        self.boards[board.id] = board
        logger.debug("stored move of task %s to %s[%d]", task_id, dest_column_id, dest_index)
        return board.tasks[task_id]

    async def reorder_columns(self, board_id: str, ordered_column_ids: Sequence[str]) -> None:
        await self._tick("reorder_columns", board_id, tuple(ordered_column_ids))
        self.boards[board_id] = reorder_columns_on(self._board(board_id), ordered_column_ids)

    async def update_column(self, column_id: str, patch: dict[str, Any]) -> Column:
        await self._tick("update_column", column_id, dict(patch))
        board = update_column_on(self._board_with_column(column_id), column_id, patch)
        self.boards[board.id] = board
        return board.column(column_id)

    async def create_column(
        self, board_id: str, column_id: str, name: str, wip_limit: int = 0, index: int | None = None
    ) -> Column:
        await self._tick("create_column", board_id, column_id, name, wip_limit, index)
        board = create_column_on(self._board(board_id), column_id, name, wip_limit, index)
        self.boards[board_id] = board
        return board.column(column_id)

    async def delete_column(self, column_id: str) -> None:
        await self._tick("delete_column", column_id)
        board = delete_column_on(self._board_with_column(column_id), column_id)
        self.boards[board.id] = board

    def put(self, board: Board) -> None:
        """Replace a stored board outright."""
        self.boards[board.id] = board
