"""Handler for 'laneboard board'."""

from laneboard.cli._common import build_column_summaries, format_column_line, load_board_or_die, output_json


def board_summary(args) -> int:
    """Show board summary: name, columns, task counts and WIP warnings."""
    _, _, board = load_board_or_die(args.repo, args.json)
    columns = build_column_summaries(board)

    if args.json:
        output_json({"id": board.id, "name": board.name, "columns": columns})
    else:
        print(board.name or board.id)
        for c in columns:
            print(format_column_line(c, indent="  "))

    return 0
