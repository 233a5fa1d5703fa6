"""Convert boards to and from YAML documents.

On disk, tasks are nested under their column in display order and carry
no positions; positions are recomputed on load.
"""

from __future__ import annotations

from typing import Any

import yaml

from laneboard.errors import PersistenceError
from laneboard.model.board import Board, Column, Task
from laneboard.model.position import reindex


def board_to_dict(board: Board) -> dict[str, Any]:
    """Serializable form of a board."""
    columns = []
    for col in board.columns:
        data: dict[str, Any] = {"id": col.id, "name": col.name}
        if col.wip_limit:
            data["wip_limit"] = col.wip_limit
        data["tasks"] = [{"id": t.id, "title": t.title} for t in board.tasks_in(col.id)]
        columns.append(data)
    return {"id": board.id, "name": board.name, "columns": columns}


def board_from_dict(data: dict[str, Any]) -> Board:
    """Build a normalized board from its serializable form."""
    if not isinstance(data, dict) or "id" not in data:
        raise PersistenceError("board document has no id")

    columns: list[Column] = []
    tasks: dict[str, Task] = {}
    for col_data in data.get("columns") or []:
        col_id = str(col_data["id"])
        col_tasks = reindex(
            [
                Task(id=str(t["id"]), title=str(t.get("title", "")), column_id=col_id)
                for t in col_data.get("tasks") or []
            ]
        )
        for task in col_tasks:
            if task.id in tasks:
                raise PersistenceError(f"task {task.id!r} appears in more than one column")
            tasks[task.id] = task
        columns.append(
            Column(
                id=col_id,
                name=str(col_data.get("name", col_id)),
                wip_limit=int(col_data.get("wip_limit") or 0),
                task_ids=tuple(t.id for t in col_tasks),
            )
        )

    return Board(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        columns=reindex(columns),
        tasks=tasks,
    )


def dump_board(board: Board) -> str:
    """Serialize a board to YAML text."""
    return yaml.dump(board_to_dict(board), default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_board_text(text: str) -> Board:
    """Parse YAML text into a board."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise PersistenceError(f"invalid board document: {exc}") from exc
    return board_from_dict(data)
