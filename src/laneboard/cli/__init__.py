"""CLI argument parser and dispatch for laneboard."""

import argparse

from laneboard.cli.board import board_summary
from laneboard.cli.column import column_add, column_limit, column_list, column_move, column_remove
from laneboard.cli.init import init_board
from laneboard.cli.task import task_add, task_archive, task_list, task_move
from laneboard.cli.web import web


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--repo", default=".", help="Path to git repository (default: .)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="store_true", help="Log engine and sync activity to stderr")

    parser = argparse.ArgumentParser(
        prog="laneboard",
        description="Kanban board with drag-and-drop reordering, stored in git",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- init ---
    init_p = nouns.add_parser("init", help="Initialize a laneboard board", parents=[common])
    init_p.add_argument("--name", help="Board name (default: repository directory name)")
    init_p.set_defaults(func=init_board)

    # --- board ---
    board_p = nouns.add_parser("board", help="Show board summary", parents=[common])
    board_p.set_defaults(func=board_summary)

    # --- task ---
    task_p = nouns.add_parser("task", help="Task operations", parents=[common])
    task_verbs = task_p.add_subparsers(dest="verb")

    task_list_p = task_verbs.add_parser("list", help="List tasks", parents=[common])
    task_list_p.add_argument("--column", dest="column", help="Filter by column ID")
    task_list_p.set_defaults(func=task_list)

    task_add_p = task_verbs.add_parser("add", help="Create a task", parents=[common])
    task_add_p.add_argument("title", help="Task title")
    task_add_p.add_argument("--column", dest="column", help="Target column ID")
    task_add_p.set_defaults(func=task_add)

    task_move_p = task_verbs.add_parser("move", help="Move a task", parents=[common])
    task_move_p.add_argument("id", help="Task ID")
    task_move_p.add_argument("--column", dest="column", required=True, help="Target column ID")
    task_move_p.add_argument("--position", type=int, help="Position in column (1-indexed)")
    task_move_p.set_defaults(func=task_move)

    task_archive_p = task_verbs.add_parser("archive", help="Archive a task", parents=[common])
    task_archive_p.add_argument("id", help="Task ID")
    task_archive_p.set_defaults(func=task_archive)

    # task with no verb = list
    task_p.set_defaults(func=task_list, column=None)

    # --- column ---
    col_p = nouns.add_parser("column", help="Column operations", parents=[common])
    col_verbs = col_p.add_subparsers(dest="verb")

    col_list_p = col_verbs.add_parser("list", help="List columns", parents=[common])
    col_list_p.set_defaults(func=column_list)

    col_add_p = col_verbs.add_parser("add", help="Create a column", parents=[common])
    col_add_p.add_argument("name", help="Column name")
    col_add_p.add_argument("--wip-limit", dest="wip_limit", type=int, default=0, help="WIP limit (0 = none)")
    col_add_p.set_defaults(func=column_add)

    col_move_p = col_verbs.add_parser("move", help="Move a column", parents=[common])
    col_move_p.add_argument("id", help="Column ID")
    col_move_p.add_argument("--position", type=int, required=True, help="New position (1-indexed)")
    col_move_p.set_defaults(func=column_move)

    col_limit_p = col_verbs.add_parser("limit", help="Set a column's WIP limit", parents=[common])
    col_limit_p.add_argument("id", help="Column ID")
    col_limit_p.add_argument("limit", type=int, help="WIP limit (0 = none)")
    col_limit_p.set_defaults(func=column_limit)

    col_remove_p = col_verbs.add_parser("remove", help="Remove an empty column", parents=[common])
    col_remove_p.add_argument("id", help="Column ID")
    col_remove_p.set_defaults(func=column_remove)

    # column with no verb = list
    col_p.set_defaults(func=column_list)

    # --- web ---
    web_p = nouns.add_parser("web", help="Serve board in browser", parents=[common])
    web_p.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    web_p.add_argument("--port", type=int, default=8618, help="Port (default: 8618)")
    web_p.set_defaults(func=web)

    return parser
