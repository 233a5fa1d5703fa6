"""Handler for 'laneboard init'."""

from pathlib import Path

from laneboard.cli._common import error, output_json
from laneboard.config import read_config
from laneboard.errors import PersistenceError
from laneboard.git import has_branch, init_repo, is_git_repo, read_board, write_board
from laneboard.model.column import new_board


def init_board(args) -> int:
    """Initialize a laneboard board in the repository."""
    repo_path = Path(args.repo).resolve()

    if not is_git_repo(repo_path):
        init_repo(repo_path)

    branch = read_config(repo_path).branch

    if has_branch(repo_path, branch):
        board = read_board(repo_path, branch)
        columns = [c.name for c in board.columns]
        if args.json:
            output_json({"repo_path": str(repo_path), "board": board.id, "columns": columns, "created": False})
        else:
            print(f"Board already initialized at {repo_path}")
        return 0

    board = new_board(args.name or repo_path.name)
    try:
        write_board(repo_path, board, "Initialize laneboard board", branch)
    except PersistenceError as e:
        error(str(e), args.json)

    columns = [c.name for c in board.columns]
    if args.json:
        output_json({"repo_path": str(repo_path), "board": board.id, "columns": columns, "created": True})
    else:
        print(f"Initialized laneboard board {board.id} at {repo_path}")
        print(f"Columns: {', '.join(columns)}")

    return 0
