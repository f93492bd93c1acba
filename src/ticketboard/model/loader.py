"""Load a ticket board from the backend into a Node tree."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from ticketboard.errors import LoadError
from ticketboard.model.board import new_board, replace_board, set_column_tickets
from ticketboard.model.node import Node
from ticketboard.models import Status, Ticket
from ticketboard.normalize import normalize_status

logger = logging.getLogger(__name__)


class BoardSource(Protocol):
    """The read side of the backend the loader needs."""

    def fetch_statuses(self) -> list[Status]: ...

    def fetch_tickets_grouped(self) -> dict[str, list[Ticket]]: ...


def build_board(statuses: list[Status], grouped: dict[str, list[Ticket]]) -> Node:
    """Merge the status catalogue and the backend's ticket grouping.

    Every defined status gets a column, even when empty. Ticket groups are
    keyed by normalized label, so groups whose names differ only by case or
    accents land in the catalogue's column. A group with no catalogue entry
    takes its status code from its first ticket and its label from the raw
    group name.
    """
    board = new_board()

    for status in statuses:
        key = normalize_status(status.label)
        board.statuses[key] = status.id
        board.labels[key] = status.label
        set_column_tickets(board, key, [])

    for raw_label, tickets in grouped.items():
        key = normalize_status(raw_label)
        set_column_tickets(board, key, tickets)
        if board.statuses[key] is None and tickets:
            board.statuses[key] = tickets[0].estado
        if board.labels[key] is None:
            board.labels[key] = raw_label

    return board


async def load_board(client: BoardSource) -> Node:
    """Fetch statuses and tickets concurrently and build a fresh board.

    Both fetches must succeed. Any failure, including malformed data,
    raises LoadError and no board is returned.
    """
    try:
        statuses, grouped = await asyncio.gather(
            asyncio.to_thread(client.fetch_statuses),
            asyncio.to_thread(client.fetch_tickets_grouped),
        )
        board = build_board(list(statuses), dict(grouped))
    except asyncio.CancelledError:
        raise
    except Exception as e:
        raise LoadError(f"could not load board: {e}") from e

    logger.info(
        "loaded %d columns, %d tickets",
        len(board.columns),
        sum(len(c.tickets) for c in board.columns),
    )
    return board


async def reload_board(board: Node, client: BoardSource) -> Node:
    """Reload into an existing board, keeping its watchers.

    On LoadError the board is left untouched.
    """
    fresh = await load_board(client)
    replace_board(board, fresh)
    return board
