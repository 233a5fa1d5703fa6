"""Immutable board snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Mapping

from laneboard.errors import InvalidMoveError


class Kind(str, Enum):
    """What a drag or a move is carrying."""

    TASK = "TASK"
    COLUMN = "COLUMN"


@dataclass(frozen=True)
class Task:
    """A card on the board."""

    id: str
    title: str = ""
    column_id: str | None = None
    position: int = 0


@dataclass(frozen=True)
class Column:
    """A column and the ordered ids of the tasks in it."""

    id: str
    name: str = ""
    position: int = 0
    wip_limit: int = 0
    task_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Board:
    """The full board state at one point in time.

    Columns are kept in display order. Tasks are keyed by id; their
    order inside a column comes from ``Column.task_ids``.
    """

    id: str
    name: str = ""
    columns: tuple[Column, ...] = ()
    tasks: Mapping[str, Task] = field(default_factory=dict)

    def column(self, column_id: str) -> Column:
        for col in self.columns:
            if col.id == column_id:
                return col
        raise InvalidMoveError(f"unknown column {column_id!r}")

    def column_index(self, column_id: str) -> int:
        for i, col in enumerate(self.columns):
            if col.id == column_id:
                return i
        raise InvalidMoveError(f"unknown column {column_id!r}")

    def has_column(self, column_id: str) -> bool:
        return any(col.id == column_id for col in self.columns)

    def tasks_in(self, column_id: str) -> tuple[Task, ...]:
        """Tasks of a column in display order."""
        return tuple(self.tasks[task_id] for task_id in self.column(column_id).task_ids)

    def find_task(self, task_id: str) -> tuple[str, int]:
        """Return (column_id, index) of a task."""
        for col in self.columns:
            if task_id in col.task_ids:
                return col.id, col.task_ids.index(task_id)
        raise InvalidMoveError(f"unknown task {task_id!r}")

    def with_columns(self, columns: tuple[Column, ...]) -> Board:
        return replace(self, columns=tuple(columns))


@dataclass(frozen=True)
class DropResult:
    """What a finished drag resolved to, in container/index terms."""

    kind: Kind
    source_container_id: str
    source_index: int
    dest_container_id: str
    dest_index: int

    @property
    def is_noop(self) -> bool:
        return self.source_container_id == self.dest_container_id and self.source_index == self.dest_index


@dataclass(frozen=True)
class Move:
    """A drop resolved to the item it moves.

    This is the form that is persisted and broadcast. For column moves
    the containers are the board id.
    """

    kind: Kind
    id: str
    source_container_id: str
    source_index: int
    dest_container_id: str
    dest_index: int

    @property
    def is_noop(self) -> bool:
        return self.source_container_id == self.dest_container_id and self.source_index == self.dest_index

    @property
    def crosses_containers(self) -> bool:
        return self.source_container_id != self.dest_container_id
