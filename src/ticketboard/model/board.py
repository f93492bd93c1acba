"""Board state: columns of tickets keyed by normalized status."""

from __future__ import annotations

import logging

from ticketboard.model.node import ListNode, Node
from ticketboard.models import Ticket

logger = logging.getLogger(__name__)


def new_board() -> Node:
    """Create an empty board.

    ``statuses`` maps column key to backend status code, ``labels`` maps
    column key to its display label, ``columns`` holds one Node per column
    with its tickets in display order.
    """
    board = Node(
        statuses=ListNode(),
        labels=ListNode(),
        columns=ListNode(),
        sync={"status": "idle"},
        generation=0,
    )
    board._index = {}
    return board


def ensure_column(board: Node, key: str) -> Node:
    """Return the column for key, creating an empty one if needed."""
    column = board.columns[key]
    if column is None:
        board.columns[key] = Node(key=key, tickets=ListNode())
        column = board.columns[key]
    return column


def set_column_tickets(board: Node, key: str, tickets: list[Ticket]) -> Node:
    """Replace a column's tickets wholesale."""
    column = ensure_column(board, key)
    fresh = ListNode()
    for ticket in tickets:
        fresh[ticket.id] = ticket
    column.tickets.replace(fresh)
    _rebuild_index(board)
    return column


def column_label(board: Node, key: str) -> str:
    return board.labels[key] or key


def _rebuild_index(board: Node) -> dict[str, str]:
    index = {}
    for key, column in board.columns.items():
        for ticket_key in column.tickets.keys():
            index[ticket_key] = key
    board._index = index
    return index


def find_ticket_column(board: Node, ticket_id: int | str) -> Node | None:
    """Find the column holding a ticket.

    Uses the id index and falls back to a full scan when the index is
    stale, rebuilding it on the way.
    """
    ticket_key = str(ticket_id)
    column_key = board._index.get(ticket_key)
    if column_key is not None:
        column = board.columns[column_key]
        if column is not None and ticket_key in column.tickets:
            return column
    column_key = _rebuild_index(board).get(ticket_key)
    return board.columns[column_key] if column_key is not None else None


def find_ticket(board: Node, ticket_id: int | str) -> Ticket | None:
    column = find_ticket_column(board, ticket_id)
    if column is None:
        return None
    return column.tickets[ticket_id]


def remove_ticket(board: Node, ticket_id: int | str) -> tuple[str, int, Ticket] | None:
    """Take a ticket off the board.

    Returns (column_key, index, ticket) describing where it was, or None.
    """
    column = find_ticket_column(board, ticket_id)
    if column is None:
        return None
    ticket_key = str(ticket_id)
    index = column.tickets.index(ticket_key)
    ticket = column.tickets[ticket_key]
    column.tickets[ticket_key] = None
    board._index.pop(ticket_key, None)
    return column.key, index, ticket


def place_ticket(board: Node, column_key: str, ticket: Ticket, position: int | None = None) -> bool:
    """Put a ticket into a column at position (default: end).

    Any other copy of the ticket on the board is removed first, so a
    ticket id lives in one column only. Columns without a status code
    take no tickets; returns False and leaves the board alone then.
    """
    if board.statuses[column_key] is None:
        logger.warning("column %r has no status code, not placing ticket %s there", column_key, ticket.id)
        return False
    current = find_ticket_column(board, ticket.id)
    if current is not None and current.key != column_key:
        remove_ticket(board, ticket.id)
    column = ensure_column(board, column_key)
    column.tickets.insert(ticket.id, ticket, position)
    board._index[str(ticket.id)] = column_key
    return True


def reorder_ticket(board: Node, ticket_id: int | str, position: int) -> None:
    """Move a ticket to position within its own column."""
    column = find_ticket_column(board, ticket_id)
    if column is not None:
        column.tickets.move(ticket_id, position)


def replace_board(board: Node, other: Node) -> None:
    """Replace board contents with other's in place, keeping watchers.

    Bumps ``generation`` so in-flight work can tell a reload happened.
    """
    board.statuses.replace(other.statuses)
    board.labels.replace(other.labels)
    board.columns.replace(other.columns)
    board.generation = (board.generation or 0) + 1
    _rebuild_index(board)


def board_snapshot(board: Node) -> dict[str, list[int]]:
    """Ticket ids per column key, in display order."""
    return {key: [t.id for t in column.tickets] for key, column in board.columns.items()}
