"""Handlers for 'laneboard column' commands."""

from laneboard.cli._common import (
    build_column_summaries,
    check_committed,
    error,
    find_column,
    format_column_line,
    load_board_or_die,
    output_json,
    output_result,
    run_in_session,
    run_move,
)


def column_list(args) -> int:
    """List all columns."""
    _, _, board = load_board_or_die(args.repo, args.json)
    items = build_column_summaries(board)

    if args.json:
        output_json(items)
    else:
        for c in items:
            print(format_column_line(c))

    return 0


def column_add(args) -> int:
    """Create a new column at the right end of the board."""
    backend, config, board = load_board_or_die(args.repo, args.json)

    async def _add(session):
        column = await session.add_column(args.name, wip_limit=args.wip_limit or 0)
        return column, session.state.error

    try:
        (column, failure), board = run_in_session(backend, config, board, _add)
    except ValueError as e:
        error(str(e), args.json)
    if column is None:
        error(failure, args.json)

    output_result(
        {"id": column.id, "name": column.name, "position": column.position + 1, "wip_limit": column.wip_limit},
        f"Created column {column.id}",
        args.json,
    )
    return 0


def column_move(args) -> int:
    """Move a column to a 1-indexed position."""
    backend, config, board = load_board_or_die(args.repo, args.json)
    column = find_column(board, args.id, args.json)
    index = min(max(0, args.position - 1), len(board.columns) - 1)

    committed, board = run_move(backend, config, board, lambda s: s.move_column(column.id, index))
    check_committed(committed, args.json)

    order = [c.id for c in board.columns]
    output_result(
        {"id": column.id, "position": board.column_index(column.id) + 1, "order": order},
        f"Moved column {column.id} to position {board.column_index(column.id) + 1}",
        args.json,
    )
    return 0


def column_limit(args) -> int:
    """Set a column's WIP limit (0 clears it)."""
    backend, config, board = load_board_or_die(args.repo, args.json)
    column = find_column(board, args.id, args.json)
    if args.limit < 0:
        error("WIP limit must be non-negative", args.json)

    async def _set(session) -> str | None:
        if await session.set_wip_limit(column.id, args.limit):
            return None
        return session.state.error

    failure, board = run_in_session(backend, config, board, _set)
    if failure:
        error(failure, args.json)

    summary = next(c for c in build_column_summaries(board) if c["id"] == column.id)
    output_result(summary, format_column_line(summary), args.json)
    return 0


def column_remove(args) -> int:
    """Remove an empty column."""
    backend, config, board = load_board_or_die(args.repo, args.json)
    column = find_column(board, args.id, args.json)
    if column.task_ids:
        count = len(column.task_ids)
        error(
            f"Column '{column.id}' still has {count} task{'s' if count != 1 else ''}. Move or archive them first.",
            args.json,
        )

    async def _remove(session) -> str | None:
        if await session.remove_column(column.id):
            return None
        return session.state.error

    failure, board = run_in_session(backend, config, board, _remove)
    if failure:
        error(failure, args.json)

    output_result(
        {"id": column.id, "name": column.name, "order": [c.id for c in board.columns]},
        f'Removed column "{column.name}"',
        args.json,
    )
    return 0
