"""Handlers for 'laneboard task' commands."""

from laneboard.cli._common import (
    check_committed,
    error,
    find_column,
    find_task,
    load_board_or_die,
    output_json,
    output_result,
    run_move,
)
from laneboard.errors import PersistenceError
from laneboard.ids import normalize_id
from laneboard.model.task import add_task, archive_task
from laneboard.wip import check_limit


def task_list(args) -> int:
    """List tasks grouped by column."""
    _, _, board = load_board_or_die(args.repo, args.json)

    columns = []
    for col in board.columns:
        if args.column and col.id != args.column:
            continue
        tasks = [{"id": t.id, "title": t.title, "position": t.position} for t in board.tasks_in(col.id)]
        columns.append({"id": col.id, "name": col.name, "tasks": tasks})

    if args.json:
        items = [
            {**t, "column": {"id": col["id"], "name": col["name"]}}
            for col in columns
            for t in col["tasks"]
        ]
        output_json(items)
    else:
        for col in columns:
            print(f"{col['id']}  {col['name']}")
            for t in col["tasks"]:
                print(f"  {t['id']}  {t['title']}")

    return 0


def task_add(args) -> int:
    """Create a new task."""
    backend, _, board = load_board_or_die(args.repo, args.json)

    column_id = None
    if args.column:
        column_id = find_column(board, args.column, args.json).id
    if not board.columns:
        error("board has no columns", args.json)

    task_id, board = add_task(board, args.title, column_id)
    column = board.column(board.tasks[task_id].column_id)
    try:
        backend.save(board, f"Add task: {args.title}")
    except PersistenceError as e:
        error(str(e), args.json)

    output_result(
        {"id": task_id, "title": args.title, "column": {"id": column.id, "name": column.name}},
        f"Created task {task_id} in {column.name}",
        args.json,
    )
    return 0


def task_move(args) -> int:
    """Move a task to a column, optionally at a 1-indexed position."""
    args.id = normalize_id(args.id)
    backend, config, board = load_board_or_die(args.repo, args.json)
    find_task(board, args.id, args.json)
    target = find_column(board, args.column, args.json)

    source_id, _ = board.find_task(args.id)
    length = len(target.task_ids)
    if args.position is None:
        index = length - 1 if source_id == target.id else length
    else:
        index = max(0, args.position - 1)
        index = min(index, length - 1 if source_id == target.id else length)

    committed, board = run_move(backend, config, board, lambda s: s.move_task(args.id, target.id, index))
    check_committed(committed, args.json)

    column = board.column(target.id)
    status = check_limit(column)
    data = {
        "id": args.id,
        "column": {"id": column.id, "name": column.name},
        "position": board.tasks[args.id].position + 1,
        "wip": {"exceeded": status.exceeded, "count": status.count, "limit": status.limit},
    }
    text = f"Moved task {args.id} to {column.name}"
    if status.exceeded:
        text += f" (warning: {status.count} tasks over WIP limit of {status.limit})"
    output_result(data, text, args.json)
    return 0


def task_archive(args) -> int:
    """Archive (remove) a task."""
    args.id = normalize_id(args.id)
    backend, _, board = load_board_or_die(args.repo, args.json)
    find_task(board, args.id, args.json)

    board = archive_task(board, args.id)
    try:
        backend.save(board, f"Archive task {args.id}")
    except PersistenceError as e:
        error(str(e), args.json)

    output_result({"id": args.id}, f"Archived task {args.id}", args.json)
    return 0
