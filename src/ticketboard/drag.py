"""Turn drag gestures into board moves."""

from __future__ import annotations

import logging

from ticketboard.model.board import find_ticket_column, reorder_ticket
from ticketboard.model.node import Node
from ticketboard.models import ColumnMove, Reorder, Ticket
from ticketboard.normalize import normalize_status

logger = logging.getLogger(__name__)


class CardDragManager:
    """Tracks the ticket being dragged and resolves where it was dropped.

    Works on ids only, so any pointer mechanism that can report "drag of X
    started" and "drag of X ended over Y" can drive it. Y is either a
    column key (or a label that normalizes to one) or another ticket's id.
    """

    def __init__(self, board: Node):
        self.board = board
        self.dragging: Ticket | None = None

    @property
    def active(self) -> bool:
        return self.dragging is not None

    def start(self, ticket_id: int | str) -> Ticket | None:
        """Pick up a ticket. Returns it, or None if it is not on the board."""
        column = find_ticket_column(self.board, ticket_id)
        self.dragging = column.tickets[ticket_id] if column is not None else None
        return self.dragging

    def cancel(self) -> None:
        self.dragging = None

    def finish(self, ticket_id: int | str, target_id: int | str | None) -> ColumnMove | Reorder | None:
        """Drop a ticket on target_id.

        Same-column drops are applied to the board right away and returned
        as a Reorder. Drops on another column return a ColumnMove for the
        reconciler and leave the board alone. Anything unresolvable returns
        None and changes nothing.
        """
        self.dragging = None
        if target_id is None:
            return None

        source = find_ticket_column(self.board, ticket_id)
        if source is None:
            return None
        ticket = source.tickets[ticket_id]

        target_ticket: str | None = None
        target_key = normalize_status(str(target_id))
        destination = self.board.columns[target_key]
        if destination is None:
            target_ticket = str(target_id).strip()
            destination = find_ticket_column(self.board, target_ticket)
            if destination is None:
                return None

        if destination is source:
            return self._reorder(source, ticket, target_ticket)

        status_code = self.board.statuses[destination.key]
        if status_code is None:
            logger.warning(
                "column %r has no status code, cannot move ticket %s there",
                destination.key,
                ticket.id,
            )
            return None

        return ColumnMove(
            ticket=ticket,
            from_column=source.key,
            to_column=destination.key,
            status_code=status_code,
        )

    def _reorder(self, column: Node, ticket: Ticket, target_ticket: str | None) -> Reorder | None:
        keys = column.tickets.keys()
        old_index = keys.index(str(ticket.id))
        # Dropping on the column body itself sends the ticket to the bottom
        new_index = keys.index(target_ticket) if target_ticket is not None else len(keys) - 1
        if new_index == old_index:
            return None
        reorder_ticket(self.board, ticket.id, new_index)
        return Reorder(ticket=ticket, column=column.key, old_index=old_index, new_index=new_index)
