"""Board model: immutable snapshots, positions and reorder algorithms."""

from laneboard.model.board import Board, Column, DropResult, Kind, Move, Task
from laneboard.model.codec import board_from_dict, board_to_dict, dump_board, load_board_text
from laneboard.model.column import add_column, new_board, remove_column, rename_column, set_wip_limit, slugify
from laneboard.model.node import Node
from laneboard.model.position import is_normalized, reindex
from laneboard.model.reorder import (
    apply_move,
    locate_move,
    move_between_containers,
    reorder_containers,
    reorder_within_container,
    resolve_drop,
)
from laneboard.model.task import add_task, archive_task

__all__ = [
    "Board",
    "Column",
    "DropResult",
    "Kind",
    "Move",
    "Node",
    "Task",
    "add_column",
    "add_task",
    "apply_move",
    "archive_task",
    "board_from_dict",
    "board_to_dict",
    "dump_board",
    "is_normalized",
    "load_board_text",
    "locate_move",
    "move_between_containers",
    "new_board",
    "reindex",
    "remove_column",
    "rename_column",
    "reorder_containers",
    "reorder_within_container",
    "resolve_drop",
    "set_wip_limit",
    "slugify",
]
