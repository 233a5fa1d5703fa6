"""Task operations for laneboard boards."""

from dataclasses import replace

from laneboard.ids import max_id, next_id
from laneboard.model.board import Board, Task
from laneboard.model.position import reindex


def _rebuild_column(board: Board, tasks: dict[str, Task], column_id: str, task_ids: list[str]) -> Board:
    """Store task_ids as the column's order and reindex its tasks."""
    ordered = reindex([tasks[task_id] for task_id in task_ids])
    tasks.update((t.id, t) for t in ordered)
    columns = tuple(
        replace(col, task_ids=tuple(task_ids)) if col.id == column_id else col for col in board.columns
    )
    return replace(board, columns=columns, tasks=tasks)


def add_task(
    board: Board,
    title: str,
    column_id: str | None = None,
    position: int | None = None,
) -> tuple[str, Board]:
    """Create a task in a column (the first one by default).

    Returns (task_id, new_board).
    """
    if not board.columns:
        raise ValueError("board has no columns")
    column = board.column(column_id) if column_id is not None else board.columns[0]
    task_id = next_id(max_id(list(board.tasks.keys())))

    task_ids = list(column.task_ids)
    insert_pos = min(position, len(task_ids)) if position is not None else len(task_ids)
    task_ids.insert(insert_pos, task_id)

    tasks = dict(board.tasks)
    tasks[task_id] = Task(id=task_id, title=title, column_id=column.id)
    return task_id, _rebuild_column(board, tasks, column.id, task_ids)


def archive_task(board: Board, task_id: str) -> Board:
    """Remove a task from the board and close the gap in its column."""
    column_id, index = board.find_task(task_id)
    task_ids = list(board.column(column_id).task_ids)
    del task_ids[index]
    tasks = dict(board.tasks)
    del tasks[task_id]
    return _rebuild_column(board, tasks, column_id, task_ids)
