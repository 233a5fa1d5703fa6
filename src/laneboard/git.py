"""Git-backed persistence for laneboard.

The board lives as ``board.yaml`` on its own branch. Every change is one
commit on that branch, written with plumbing commands so the working
tree and the checked-out branch are never touched.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from pathlib import Path
from typing import Any, Callable, Sequence

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from laneboard.backend import (
    create_column_on,
    delete_column_on,
    move_task_on,
    reorder_columns_on,
    update_column_on,
)
from laneboard.errors import BoardNotFoundError, PersistenceError
from laneboard.model.board import Board, Column, Task
from laneboard.model.codec import dump_board, load_board_text

logger = logging.getLogger(__name__)

BOARD_FILE = "board.yaml"
DEFAULT_BRANCH = "laneboard"


def _get_repo(repo_path: str | Path) -> Repo:
    return Repo(repo_path)


def is_git_repo(path: str | Path) -> bool:
    """Check if path is inside a git repository."""
    try:
        Repo(path)
        return True
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False


def init_repo(path: str | Path) -> Repo:
    """Initialize a new git repository at path."""
    return Repo.init(path)


def has_branch(repo_path: str | Path, branch: str = DEFAULT_BRANCH) -> bool:
    """Check if a branch exists in the repository."""
    repo = _get_repo(repo_path)
    return branch in [h.name for h in repo.heads]


def _branch_tip(repo: Repo, branch: str) -> str | None:
    try:
        return repo.git.rev_parse("--verify", f"refs/heads/{branch}")
    except GitCommandError:
        return None


def _hash_object(repo_path: Path, content: str) -> str:
    """Write content to git object store and return the blob hash."""
    result = subprocess.run(
        ["git", "hash-object", "-w", "--stdin"],
        cwd=repo_path,
        input=content.encode("utf-8"),
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8").strip()


def _mktree(repo_path: Path, entries: list[tuple[str, str, str, str]]) -> str:
    """Create a tree object from (mode, type, sha, name) entries and return its hash."""
    lines = [f"{mode} {typ} {sha}\t{name}" for mode, typ, sha, name in entries]
    content = "\n".join(lines) + "\n" if lines else ""
    result = subprocess.run(
        ["git", "mktree"],
        cwd=repo_path,
        input=content.encode("utf-8"),
        capture_output=True,
        check=True,
    )
    return result.stdout.decode("utf-8").strip()


def read_board(repo_path: str | Path, branch: str = DEFAULT_BRANCH) -> Board:
    """Load the board from the tip of its branch."""
    repo = _get_repo(repo_path)
    try:
        text = repo.git.show(f"refs/heads/{branch}:{BOARD_FILE}")
    except GitCommandError as exc:
        raise BoardNotFoundError(f"no board on branch {branch!r} in {repo_path}") from exc
    return load_board_text(text)


def write_board(repo_path: str | Path, board: Board, message: str, branch: str = DEFAULT_BRANCH) -> str:
    """Commit the board to its branch. Returns the new commit hash.

    The branch ref is only moved if it still points at the commit the
    new one was built on.
    """
    repo_path = Path(repo_path)
    repo = _get_repo(repo_path)
    parent = _branch_tip(repo, branch)
    try:
        blob = _hash_object(repo_path, dump_board(board))
        tree = _mktree(repo_path, [("100644", "blob", blob, BOARD_FILE)])
        args = ["-p", parent] if parent else []
        commit = repo.git.commit_tree(*args, "-m", message, tree)
        ref_args = [f"refs/heads/{branch}", commit]
        if parent:
            ref_args.append(parent)
        repo.git.update_ref(*ref_args)
    except (GitCommandError, subprocess.CalledProcessError) as exc:
        raise PersistenceError(f"could not commit board: {exc}") from exc
    logger.debug("committed %s on %s: %s", commit[:7], branch, message)
    return commit


class GitBackend:
    """Backend that stores one board per branch of a git repository.

    Git I/O runs in worker threads so the event loop is never blocked.
    Writes from this process are serialized; writes from elsewhere are
    caught by the compare-and-swap on the branch ref.
    """

    def __init__(self, repo_path: str | Path, branch: str = DEFAULT_BRANCH) -> None:
        self.repo_path = Path(repo_path)
        self.branch = branch
        self._lock = asyncio.Lock()

    def load(self) -> Board:
        return read_board(self.repo_path, self.branch)

    def save(self, board: Board, message: str) -> str:
        return write_board(self.repo_path, board, message, self.branch)

    async def _mutate(self, change: Callable[[Board], Board], message: str) -> Board:
        def _run() -> Board:
            board = change(self.load())
            self.save(board, message)
            return board

        async with self._lock:
            return await asyncio.to_thread(_run)

    async def fetch_board(self, board_id: str) -> Board:
        board = await asyncio.to_thread(self.load)
        if board.id != board_id:
            raise BoardNotFoundError(f"branch {self.branch!r} holds board {board.id!r}, not {board_id!r}")
        return board

    async def move_task(self, task_id: str, dest_column_id: str, dest_index: int) -> Task:
        board = await self._mutate(
            lambda b: move_task_on(b, task_id, dest_column_id, dest_index),
            f"Move task {task_id} to {dest_column_id}",
        )
        return board.tasks[task_id]

    async def reorder_columns(self, board_id: str, ordered_column_ids: Sequence[str]) -> None:
        def change(board: Board) -> Board:
            if board.id != board_id:
                raise BoardNotFoundError(f"board {board_id!r} not found")
            return reorder_columns_on(board, ordered_column_ids)

        await self._mutate(change, "Reorder columns")

    async def update_column(self, column_id: str, patch: dict[str, Any]) -> Column:
        fields = ", ".join(sorted(patch))
        board = await self._mutate(
            lambda b: update_column_on(b, column_id, patch),
            f"Update column {column_id}: {fields}",
        )
        return board.column(column_id)

    async def create_column(
        self, board_id: str, column_id: str, name: str, wip_limit: int = 0, index: int | None = None
    ) -> Column:
        def change(board: Board) -> Board:
            if board.id != board_id:
                raise BoardNotFoundError(f"board {board_id!r} not found")
            return create_column_on(board, column_id, name, wip_limit, index)

        board = await self._mutate(change, f"Add column: {name}")
        return board.column(column_id)

    async def delete_column(self, column_id: str) -> None:
        await self._mutate(lambda b: delete_column_on(b, column_id), f"Remove column {column_id}")
