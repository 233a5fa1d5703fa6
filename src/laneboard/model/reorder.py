"""Reorder algorithms for tasks and columns.

The three primitives are pure: they take sequences of immutable items
and return new tuples, never touching their input. The board-level
helpers at the bottom run them against a ``Board`` snapshot and keep
each column's ``task_ids`` in step with task positions.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, TypeVar

from laneboard.errors import InvalidMoveError
from laneboard.model.board import Board, DropResult, Kind, Move, Task
from laneboard.model.position import reindex, sort_by_position

T = TypeVar("T")


def _check_source(index: int, length: int) -> None:
    if not 0 <= index < length:
        raise InvalidMoveError(f"source index {index} out of range for {length} items")


def _check_dest(index: int, length: int) -> None:
    # index == length means "append at the end"
    if not 0 <= index <= length:
        raise InvalidMoveError(f"destination index {index} out of range for {length} items")


def reorder_within_container(items: Sequence[T], from_index: int, to_index: int) -> tuple[T, ...]:
    """Move the item at from_index so it ends up at to_index, then reindex."""
    items = tuple(items)
    _check_source(from_index, len(items))
    _check_dest(to_index, len(items))
    if from_index == to_index:
        return items
    reordered = list(items)
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return reindex(reordered)


def move_between_containers(
    all_items: Sequence[Task],
    source_container_id: str,
    dest_container_id: str,
    source_index: int,
    dest_index: int,
) -> tuple[Task, ...]:
    """Move one task from a source column to a destination column.

    Both columns are reindexed independently. Items belonging to
    neither column are passed through untouched, ahead of the two
    reindexed columns.
    """
    all_items = tuple(all_items)
    source = sort_by_position(t for t in all_items if t.column_id == source_container_id)

    if source_container_id == dest_container_id:
        _check_source(source_index, len(source))
        _check_dest(dest_index, len(source))
        if source_index == dest_index:
            return all_items
        rest = tuple(t for t in all_items if t.column_id != source_container_id)
        return rest + reorder_within_container(source, source_index, dest_index)

    dest = sort_by_position(t for t in all_items if t.column_id == dest_container_id)
    rest = tuple(t for t in all_items if t.column_id not in (source_container_id, dest_container_id))

    _check_source(source_index, len(source))
    _check_dest(dest_index, len(dest))

    moved = replace(source.pop(source_index), column_id=dest_container_id)
    dest.insert(dest_index, moved)
    return rest + reindex(source) + reindex(dest)


def reorder_containers(containers: Sequence[T], from_index: int, to_index: int) -> tuple[T, ...]:
    """Reorder the board's columns. Same semantics as a within-column reorder."""
    return reorder_within_container(containers, from_index, to_index)


# --- Board-level application ---


def resolve_drop(board: Board, result: DropResult) -> Move:
    """Find which task or column a drop result is moving."""
    if result.kind is Kind.COLUMN:
        _check_source(result.source_index, len(board.columns))
        item_id = board.columns[result.source_index].id
    else:
        task_ids = board.column(result.source_container_id).task_ids
        _check_source(result.source_index, len(task_ids))
        item_id = task_ids[result.source_index]
        board.column(result.dest_container_id)
    return Move(
        kind=result.kind,
        id=item_id,
        source_container_id=result.source_container_id,
        source_index=result.source_index,
        dest_container_id=result.dest_container_id,
        dest_index=result.dest_index,
    )


def locate_move(board: Board, kind: Kind, item_id: str, dest_container_id: str | None, dest_index: int) -> Move:
    """Build a move for an id from wherever it currently sits on this board.

    Used for moves that arrive from elsewhere (peers, the CLI), where the
    destination index may have been computed against a different board.
    The index is clamped into range instead of rejected.
    """
    if kind is Kind.COLUMN:
        source_index = board.column_index(item_id)
        last = len(board.columns) - 1
        return Move(kind, item_id, board.id, source_index, board.id, max(0, min(dest_index, last)))

    source_id, source_index = board.find_task(item_id)
    dest_id = dest_container_id or source_id
    dest_len = len(board.column(dest_id).task_ids)
    last = dest_len - 1 if dest_id == source_id else dest_len
    return Move(kind, item_id, source_id, source_index, dest_id, max(0, min(dest_index, last)))


def _normalized_tasks(board: Board, column_id: str) -> tuple[Task, ...]:
    """Column tasks with positions matching task_ids order and column_id set."""
    tasks = [
        t if t.column_id == column_id else replace(t, column_id=column_id)
        for t in board.tasks_in(column_id)
    ]
    return reindex(tasks)


def apply_move(board: Board, move: Move) -> Board:
    """Return a new board with the move applied."""
    if move.kind is Kind.COLUMN:
        columns = reorder_containers(board.columns, move.source_index, move.dest_index)
        if columns == board.columns:
            return board
        return board.with_columns(columns)

    source = board.column(move.source_container_id)
    dest = board.column(move.dest_container_id)
    _check_source(move.source_index, len(source.task_ids))
    if source.task_ids[move.source_index] != move.id:
        raise InvalidMoveError(f"task {move.id!r} is not at index {move.source_index} of {source.id!r}")
    if move.is_noop:
        return board

    involved = _normalized_tasks(board, source.id)
    if dest.id != source.id:
        involved += _normalized_tasks(board, dest.id)

    moved = move_between_containers(involved, source.id, dest.id, move.source_index, move.dest_index)

    tasks = dict(board.tasks)
    tasks.update((t.id, t) for t in moved)
    touched = {source.id, dest.id}
    columns = tuple(
        replace(col, task_ids=tuple(t.id for t in sort_by_position(t for t in moved if t.column_id == col.id)))
        if col.id in touched
        else col
        for col in board.columns
    )
    return replace(board, columns=columns, tasks=tasks)
