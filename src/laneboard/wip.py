"""Advisory work-in-progress limit checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from laneboard.model.board import Board, Column
from laneboard.model.node import Node


@dataclass(frozen=True)
class WipStatus:
    """Task count of a column against its limit. A limit of 0 means unlimited."""

    exceeded: bool
    count: int
    limit: int

    @property
    def remaining(self) -> int | None:
        if not self.limit:
            return None
        return self.limit - self.count


def check_limit(column: Column) -> WipStatus:
    """Compare a column's task count with its WIP limit.

    Only used for display; moves are never blocked on the result.
    """
    limit = column.wip_limit or 0
    count = len(column.task_ids)
    return WipStatus(exceeded=bool(limit) and count > limit, count=count, limit=limit)


def check_columns(board: Board, column_ids: Iterable[str]) -> dict[str, WipStatus]:
    """Check each listed column that still exists on the board."""
    return {cid: check_limit(board.column(cid)) for cid in dict.fromkeys(column_ids) if board.has_column(cid)}


def exceeded_columns(board: Board) -> dict[str, WipStatus]:
    """All columns currently over their limit."""
    statuses = check_columns(board, (col.id for col in board.columns))
    return {cid: status for cid, status in statuses.items() if status.exceeded}


def record_wip(state: Node, board: Board, column_ids: Iterable[str] | None = None) -> None:
    """Refresh ``state.wip`` (column id -> WipStatus of exceeded columns).

    With column_ids, only those columns are re-evaluated; others keep
    their previous entry. Without, the whole board is re-evaluated.
    """
    if column_ids is None:
        state.wip = exceeded_columns(board)
        return
    current = dict(state.wip.items()) if state.wip is not None else {}
    for cid in dict.fromkeys(column_ids):
        if not board.has_column(cid):
            current.pop(cid, None)
            continue
        status = check_limit(board.column(cid))
        if status.exceeded:
            current[cid] = status
        else:
            current.pop(cid, None)
    state.wip = current
