"""Handler for 'laneboard web' command."""

import shutil
import sys
from pathlib import Path


def web(args) -> int:
    try:
        from textual_serve.server import Server
    except ImportError:
        print("error: 'laneboard web' needs textual-serve (pip install laneboard[web])", file=sys.stderr)
        return 1

    repo_path = str(Path(args.repo).resolve())

    laneboard = shutil.which("laneboard")
    if laneboard is None:
        print("error: laneboard not found on PATH", file=sys.stderr)
        return 1

    server = Server(
        f"{laneboard} {repo_path}",
        host=args.host,
        port=args.port,
        title="laneboard",
    )

    print(f"serving {repo_path} at http://{args.host}:{args.port}")
    server.serve()
    return 0
