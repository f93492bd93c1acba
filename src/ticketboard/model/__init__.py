"""Reactive board state."""

from ticketboard.model.board import (
    board_snapshot,
    column_label,
    ensure_column,
    find_ticket,
    find_ticket_column,
    new_board,
    place_ticket,
    remove_ticket,
    reorder_ticket,
    replace_board,
    set_column_tickets,
)
from ticketboard.model.loader import build_board, load_board, reload_board
from ticketboard.model.node import ListNode, Node

__all__ = [
    "ListNode",
    "Node",
    "board_snapshot",
    "build_board",
    "column_label",
    "ensure_column",
    "find_ticket",
    "find_ticket_column",
    "load_board",
    "new_board",
    "place_ticket",
    "reload_board",
    "remove_ticket",
    "reorder_ticket",
    "replace_board",
    "set_column_tickets",
]
