"""Entry point for laneboard CLI."""

import logging
import sys
from pathlib import Path

NOUNS = {"init", "board", "task", "column", "web"}


def main():
    # No subcommand or non-noun argument = TUI mode
    if len(sys.argv) < 2 or (sys.argv[1] not in NOUNS and not sys.argv[1].startswith("-")):
        from laneboard.ui import LaneboardApp

        path = sys.argv[1] if len(sys.argv) > 1 and not sys.argv[1].startswith("-") else "."
        app = LaneboardApp(Path(path).resolve())
        app.run()
        return

    from laneboard.cli import build_parser

    parser = build_parser()
    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
