"""Exceptions raised across the board engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ticketboard.models import ColumnMove


class TicketboardError(Exception):
    """Base class for ticketboard errors."""


class ApiError(TicketboardError):
    """The backend rejected a request or could not be reached."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class LoadError(TicketboardError):
    """Loading the board failed. The previous board is left as it was."""


class SyncError(TicketboardError):
    """A column move could not be saved and was rolled back."""

    def __init__(self, move: ColumnMove, cause: BaseException):
        super().__init__(f"could not move ticket {move.ticket.id} to {move.to_column!r}: {cause}")
        self.move = move
        self.cause = cause
