"""Optimistic update engine.

A drop is applied to local state at once, then persisted in the
background. If the backend rejects it, the move is reverted and the
error is put on the state node for the UI to show. Only persisted moves
are broadcast to peers.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from laneboard.backend import Backend
from laneboard.errors import InvalidMoveError
from laneboard.model.board import Board, DropResult, Kind, Move
from laneboard.model.node import Node
from laneboard.model.reorder import apply_move, locate_move, resolve_drop
from laneboard.sync import SyncAdapter
from laneboard.wip import record_wip

logger = logging.getLogger(__name__)


class CommitStatus(str, Enum):
    PENDING = "pending"
    PERSISTED = "persisted"
    ROLLED_BACK = "rolled_back"


@dataclass
class CommittedMove:
    """A move that has been applied locally, and what became of it."""

    move: Move
    before: Board
    after: Board
    status: CommitStatus = CommitStatus.PENDING
    error: str | None = None
    broadcast: bool = False
    task: asyncio.Task | None = field(default=None, repr=False, compare=False)

    async def wait(self) -> CommittedMove:
        """Wait for the persistence round trip to finish."""
        if self.task is not None:
            await asyncio.shield(self.task)
        return self


def touched_columns(move: Move) -> list[str]:
    """Columns whose task count a move can change."""
    if move.kind is Kind.COLUMN:
        return []
    if move.crosses_containers:
        return [move.dest_container_id, move.source_container_id]
    return [move.dest_container_id]


class OptimisticEngine:
    """Applies moves to ``state.board`` and reconciles with the backend."""

    def __init__(self, state: Node, backend: Backend, sync: SyncAdapter | None = None) -> None:
        self.state = state
        self.backend = backend
        self.sync = sync
        self.pending: set[asyncio.Task] = set()

    def apply_move(self, result: DropResult) -> CommittedMove:
        """Commit a drop locally and start persisting it."""
        move = resolve_drop(self.state.board, result)
        return self.commit(move)

    def commit(self, move: Move) -> CommittedMove:
        before = self.state.board
        after = apply_move(before, move)
        committed = CommittedMove(move=move, before=before, after=after)
        if after is before:
            committed.status = CommitStatus.PERSISTED
            return committed

        self.state.board = after
        record_wip(self.state, after, touched_columns(move))

        task = asyncio.get_running_loop().create_task(self._persist(committed))
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)
        committed.task = task
        return committed

    async def drain(self) -> None:
        """Wait for every in-flight move."""
        while self.pending:
            await asyncio.gather(*list(self.pending), return_exceptions=True)

    async def _persist(self, committed: CommittedMove) -> CommittedMove:
        move = committed.move
        try:
            if move.kind is Kind.TASK:
                await self.backend.move_task(move.id, move.dest_container_id, move.dest_index)
            else:
                order = [col.id for col in committed.after.columns]
                await self.backend.reorder_columns(committed.after.id, order)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            self._rollback(committed, exc)
            return committed

        committed.status = CommitStatus.PERSISTED
        if self.sync is not None:
            committed.broadcast = await self.sync.broadcast(move)
        return committed

    def _rollback(self, committed: CommittedMove, exc: Exception) -> None:
        move = committed.move
        logger.warning("saving move of %s %s failed, reverting: %s", move.kind.value, move.id, exc)

        current = self.state.board
        if current is committed.after:
            restored = committed.before
        else:
            # Other moves landed since; put back only this item.
            try:
                undo = locate_move(current, move.kind, move.id, move.source_container_id, move.source_index)
                restored = apply_move(current, undo)
            except InvalidMoveError:
                restored = committed.before

        self.state.board = restored
        record_wip(self.state, restored, touched_columns(move))
        self.state.error = f"Could not save move of {move.kind.value.lower()} {move.id}: {exc}"
        committed.status = CommitStatus.ROLLED_BACK
        committed.error = str(exc)
