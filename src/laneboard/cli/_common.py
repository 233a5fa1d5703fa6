"""Shared helpers for CLI command handlers."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

from laneboard.channel import LocalHub
from laneboard.config import Config, read_config
from laneboard.engine import CommitStatus, CommittedMove
from laneboard.errors import LaneboardError
from laneboard.git import GitBackend, is_git_repo
from laneboard.model.board import Board, Column
from laneboard.session import BoardSession
from laneboard.wip import check_limit

T = TypeVar("T")


def open_backend(repo: str, json_mode: bool) -> tuple[GitBackend, Config]:
    """Backend and config for a repo path. Exit 1 if it is not a repository."""
    repo_path = Path(repo).resolve()
    if not is_git_repo(repo_path):
        error(f"{repo_path} is not a git repository", json_mode)
    config = read_config(repo_path)
    return GitBackend(repo_path, config.branch), config


def load_board_or_die(repo: str, json_mode: bool) -> tuple[GitBackend, Config, Board]:
    """Load the board from repo path. Exit 1 with message if not found."""
    backend, config = open_backend(repo, json_mode)
    try:
        return backend, config, backend.load()
    except LaneboardError as e:
        error(str(e), json_mode)


def run_in_session(
    backend: GitBackend,
    config: Config,
    board: Board,
    action: Callable[[BoardSession], Awaitable[T]],
) -> tuple[T, Board]:
    """Open a session on the board, await action(session) and close it again.

    Returns the action's result and the board as the session last saw it.
    """

    async def _run():
        hub = LocalHub()
        session = BoardSession(
            board.id,
            backend,
            hub.channel(),
            client_id=config.session_client_id(),
            resync_on_reconnect=config.resync_on_reconnect,
        )
        async with session:
            result = await action(session)
        return result, session.board

    return asyncio.run(_run())


def run_move(
    backend: GitBackend,
    config: Config,
    board: Board,
    action: Callable[[BoardSession], CommittedMove],
) -> tuple[CommittedMove, Board]:
    """Run one move through the engine and wait for it to be saved."""

    async def _move(session: BoardSession) -> CommittedMove:
        return await action(session).wait()

    return run_in_session(backend, config, board, _move)


def check_committed(committed: CommittedMove, json_mode: bool) -> None:
    """Exit 1 if the move was rolled back."""
    if committed.status is CommitStatus.ROLLED_BACK:
        error(f"move not saved: {committed.error}", json_mode)


def find_column(board: Board, col_id: str, json_mode: bool) -> Column:
    """Lookup column by id. Exit 1 listing available columns if not found."""
    for col in board.columns:
        if col.id == col_id:
            return col
    available = [f"  {c.id}  {c.name}" for c in board.columns]
    msg = f"Column '{col_id}' not found. Available:\n" + "\n".join(available)
    error(msg, json_mode)


def find_task(board: Board, task_id: str, json_mode: bool):
    """Lookup task by id. Exit 1 if not found."""
    task = board.tasks.get(task_id)
    if task is not None:
        return task
    error(f"Task '{task_id}' not found.", json_mode)


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def build_column_summaries(board: Board) -> list[dict]:
    """Build column summary dicts from board."""
    items = []
    for col in board.columns:
        status = check_limit(col)
        items.append(
            {
                "id": col.id,
                "name": col.name,
                "position": col.position,
                "tasks": status.count,
                "wip_limit": status.limit,
                "wip_exceeded": status.exceeded,
            }
        )
    return items


def format_column_line(c: dict, indent: str = "") -> str:
    """Format a column summary dict as a text line."""
    tasks = "task" if c["tasks"] == 1 else "tasks"
    limit = f" / {c['wip_limit']}" if c["wip_limit"] else ""
    warning = "  (over WIP limit)" if c["wip_exceeded"] else ""
    return f"{indent}{c['id']:<12} {c['name']:<16} {c['tasks']}{limit} {tasks}{warning}"
