"""Handler for 'ticketboard board'."""

from ticketboard.cli._common import (
    build_column_summaries,
    format_column_line,
    load_board_or_die,
    make_client,
    output_json,
    settings,
)


def board_summary(args) -> int:
    """Show columns with their status codes and ticket counts."""
    client = make_client(settings(args))
    board = load_board_or_die(client, args.json)
    columns = build_column_summaries(board)

    if args.json:
        output_json({"columns": columns})
    else:
        for c in columns:
            print(format_column_line(c))

    return 0
