"""CLI argument parser and dispatch for ticketboard."""

import argparse

from ticketboard.cli.board import board_summary
from ticketboard.cli.ticket import ticket_add, ticket_comment, ticket_list, ticket_move
from ticketboard.cli.web import web as web_command


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--api-url", dest="api_url", help="Backend base URL (default: from config)")
    common.add_argument("--user", type=int, help="Acting user id (default: from config)")
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")

    parser = argparse.ArgumentParser(
        prog="ticketboard",
        description="Support ticket kanban board",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- board ---
    board_p = nouns.add_parser("board", help="Show board columns", parents=[common])
    board_p.set_defaults(func=board_summary)

    # --- ticket ---
    ticket_p = nouns.add_parser("ticket", help="Ticket operations", parents=[common])
    ticket_verbs = ticket_p.add_subparsers(dest="verb")

    ticket_list_p = ticket_verbs.add_parser("list", help="List tickets", parents=[common])
    ticket_list_p.add_argument("--column", dest="column", help="Filter by column label")
    ticket_list_p.set_defaults(func=ticket_list)

    ticket_move_p = ticket_verbs.add_parser("move", help="Move a ticket to another column", parents=[common])
    ticket_move_p.add_argument("id", type=int, help="Ticket ID")
    ticket_move_p.add_argument("--column", dest="column", required=True, help="Target column label")
    ticket_move_p.set_defaults(func=ticket_move)

    ticket_add_p = ticket_verbs.add_parser("add", help="Create a ticket", parents=[common])
    ticket_add_p.add_argument("title", help="Ticket title")
    ticket_add_p.add_argument("--description", default="", help="Ticket description")
    ticket_add_p.add_argument("--priority", type=int, default=1, help="Priority level (default: 1)")
    ticket_add_p.add_argument("--kind", type=int, default=1, help="Ticket category (default: 1)")
    ticket_add_p.add_argument("--department", type=int, default=1, help="Department id (default: 1)")
    ticket_add_p.set_defaults(func=ticket_add)

    ticket_comment_p = ticket_verbs.add_parser("comment", help="Comment on a ticket", parents=[common])
    ticket_comment_p.add_argument("id", type=int, help="Ticket ID")
    ticket_comment_p.add_argument("text", nargs="?", help="Comment text (omit to list comments)")
    ticket_comment_p.set_defaults(func=ticket_comment)

    # ticket with no verb = list
    ticket_p.set_defaults(func=ticket_list, column=None)

    # --- web ---
    web_p = nouns.add_parser("web", help="Serve board in browser", parents=[common])
    web_p.add_argument("--host", default="localhost", help="Bind address (default: localhost)")
    web_p.add_argument("--port", type=int, default=8617, help="Port (default: 8617)")
    web_p.set_defaults(func=web_command)

    return parser
