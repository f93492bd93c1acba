"""Apply column moves locally first, then save them to the backend.

A move shows on the board as soon as it is dropped. The status update
runs in a worker thread; if it fails the ticket goes back to where the
backend last knew it and SyncError is raised for the UI to report.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from ticketboard.errors import SyncError
from ticketboard.model.board import place_ticket, remove_ticket
from ticketboard.model.node import Node
from ticketboard.models import ColumnMove, Reorder, Ticket

logger = logging.getLogger(__name__)


class StatusUpdater(Protocol):
    """The write side of the backend the reconciler needs."""

    def update_ticket_status(self, ticket_id: int, status_code: int, user_id: int) -> Any: ...


@dataclass
class _Placement:
    column: str
    index: int
    ticket: Ticket


@dataclass
class PendingMove:
    """A column move shown on the board and waiting to be saved."""

    move: ColumnMove
    generation: int
    placed: _Placement


class MoveReconciler:
    """Owns the optimistic moves of one board.

    Status updates for the same ticket are sent one at a time in drop
    order. While several moves of a ticket are in flight, a failure only
    rolls back once the last of them has settled, and it rolls back to
    the last placement the backend accepted.

    A move has two halves: ``begin`` changes the board right away and
    ``confirm`` saves it. Every begun move must be confirmed.
    """

    def __init__(self, board: Node, client: StatusUpdater, user_id: int):
        self.board = board
        self.client = client
        self.user_id = user_id
        self._locks: dict[int, asyncio.Lock] = {}
        self._pending: dict[int, int] = {}
        self._confirmed: dict[int, _Placement] = {}

    @property
    def in_flight(self) -> int:
        return sum(self._pending.values())

    async def apply(self, move: ColumnMove | Reorder) -> bool:
        """Apply a resolved move. Returns True once the backend accepts it.

        Reorders are local only and return True straight away. Raises
        SyncError after rolling back a rejected column move.
        """
        if isinstance(move, Reorder):
            return True
        return await self.confirm(self.begin(move))

    def begin(self, move: ColumnMove) -> PendingMove:
        """Show a column move on the board without waiting for the backend."""
        generation = self.board.generation
        placed = self._apply_locally(move)
        return PendingMove(move, generation, placed)

    async def confirm(self, pending: PendingMove) -> bool:
        """Save a begun move, rolling it back if the backend rejects it."""
        move = pending.move
        ticket_id = move.ticket.id
        lock = self._locks.setdefault(ticket_id, asyncio.Lock())
        try:
            async with lock:
                await asyncio.to_thread(
                    self.client.update_ticket_status,
                    ticket_id,
                    move.status_code,
                    self.user_id,
                )
        except asyncio.CancelledError:
            self._release(ticket_id)
            raise
        except Exception as e:
            self._settle(move, pending.generation, pending.placed, error=e)
            raise SyncError(move, e) from e

        self._settle(move, pending.generation, pending.placed, error=None)
        return True

    def _apply_locally(self, move: ColumnMove) -> _Placement:
        """Optimistic half of a move. Runs before the first await."""
        ticket_id = move.ticket.id
        if not self._pending.get(ticket_id):
            where = remove_ticket(self.board, ticket_id)
            if where is not None:
                column, index, ticket = where
                self._confirmed[ticket_id] = _Placement(column, index, ticket)
        else:
            remove_ticket(self.board, ticket_id)

        moved = move.ticket.with_status(move.status_code)
        place_ticket(self.board, move.to_column, moved)
        index = self.board.columns[move.to_column].tickets.index(str(ticket_id))

        self._pending[ticket_id] = self._pending.get(ticket_id, 0) + 1
        self.board.sync.status = "pending"
        return _Placement(move.to_column, index, moved)

    def _release(self, ticket_id: int) -> int:
        remaining = self._pending.get(ticket_id, 1) - 1
        if remaining > 0:
            self._pending[ticket_id] = remaining
        else:
            self._pending.pop(ticket_id, None)
            self._locks.pop(ticket_id, None)
        return remaining

    def _settle(self, move: ColumnMove, generation: int, placed: _Placement, error: Exception | None) -> None:
        ticket_id = move.ticket.id
        remaining = self._release(ticket_id)
        reloaded = self.board.generation != generation

        if error is None:
            logger.info("ticket %s saved in %r", ticket_id, move.to_column)
            self._confirmed[ticket_id] = placed
        else:
            logger.warning("ticket %s could not be saved in %r: %s", ticket_id, move.to_column, error)
            if reloaded:
                logger.warning("board reloaded since ticket %s was moved, not rolling back", ticket_id)
            elif remaining:
                logger.info("ticket %s has %d newer moves pending, deferring rollback", ticket_id, remaining)
            else:
                self._rollback(ticket_id)

        if not remaining:
            self._confirmed.pop(ticket_id, None)

        sync = self.board.sync
        if error is not None:
            sync.status = "failed"
            sync.error = str(error)
        elif not self.in_flight:
            sync.status = "idle"

    def _rollback(self, ticket_id: int) -> None:
        confirmed = self._confirmed.get(ticket_id)
        if confirmed is None:
            return
        place_ticket(self.board, confirmed.column, confirmed.ticket, confirmed.index)
