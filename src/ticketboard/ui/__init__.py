"""Textual UI for ticketboard."""

from ticketboard.ui.app import LoginScreen, TicketBoardApp
from ticketboard.ui.board import BoardScreen

__all__ = [
    "BoardScreen",
    "LoginScreen",
    "TicketBoardApp",
]
