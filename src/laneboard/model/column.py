"""Column operations for laneboard boards."""

import re
from dataclasses import replace

from laneboard.ids import unique_id
from laneboard.model.board import Board, Column
from laneboard.model.position import reindex


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug."""
    slug = text.lower()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")
    return slug or "untitled"


def add_column(
    board: Board,
    name: str,
    wip_limit: int = 0,
    column_id: str | None = None,
    index: int | None = None,
) -> Board:
    """Insert a new, empty column at index (the right end by default).

    The id defaults to the slug of the name, deduplicated with a
    numeric suffix.
    """
    if wip_limit < 0:
        raise ValueError("wip_limit must be non-negative")
    existing = {col.id for col in board.columns}
    if column_id is None:
        column_id = unique_id(slugify(name), existing)
    elif column_id in existing:
        raise ValueError(f"column {column_id!r} already exists")

    columns = list(board.columns)
    index = len(columns) if index is None else min(max(index, 0), len(columns))
    columns.insert(index, Column(id=column_id, name=name, wip_limit=wip_limit))
    return board.with_columns(reindex(columns))


def remove_column(board: Board, column_id: str) -> Board:
    """Remove an empty column and close the gap in the column order."""
    column = board.column(column_id)
    if column.task_ids:
        count = len(column.task_ids)
        raise ValueError(f"column {column_id!r} still has {count} task{'s' if count != 1 else ''}")
    return board.with_columns(reindex([col for col in board.columns if col.id != column_id]))


def set_wip_limit(board: Board, column_id: str, limit: int | None) -> Board:
    """Set or clear (0/None) a column's WIP limit."""
    limit = limit or 0
    if limit < 0:
        raise ValueError("wip_limit must be non-negative")
    board.column(column_id)
    return board.with_columns(
        tuple(replace(col, wip_limit=limit) if col.id == column_id else col for col in board.columns)
    )


def rename_column(board: Board, column_id: str, name: str) -> Board:
    board.column(column_id)
    return board.with_columns(
        tuple(replace(col, name=name) if col.id == column_id else col for col in board.columns)
    )


DEFAULT_COLUMNS = ("Backlog", "Doing", "Done")


def new_board(name: str, board_id: str | None = None, columns=DEFAULT_COLUMNS) -> Board:
    """A fresh board with the given (default Backlog/Doing/Done) columns."""
    board = Board(id=board_id or slugify(name), name=name)
    for column_name in columns:
        board = add_column(board, column_name)
    return board
