"""Tests for board state operations."""

import logging

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


def test_new_board_is_empty():
    board = new_board()
    assert len(board.columns) == 0
    assert board.sync.status == "idle"
    assert board.generation == 0


def test_ensure_column_creates_once():
    board = new_board()
    first = ensure_column(board, "abierto")
    assert ensure_column(board, "abierto") is first
    assert first.key == "abierto"
    assert len(first.tickets) == 0


def test_find_ticket_column(board):
    assert find_ticket_column(board, 11).key == "abierto"
    assert find_ticket_column(board, "20").key == "en progreso"
    assert find_ticket_column(board, 99) is None


def test_find_ticket(board):
    assert find_ticket(board, 20).estado == 2
    assert find_ticket(board, 99) is None


def test_index_recovers_when_stale(board):
    board._index["11"] = "cerrado"
    assert find_ticket_column(board, 11).key == "abierto"
    assert board._index["11"] == "abierto"


def test_remove_ticket_reports_position(board):
    column_key, index, ticket = remove_ticket(board, 11)
    assert (column_key, index, ticket.id) == ("abierto", 1, 11)
    assert board_snapshot(board)["abierto"] == [10, 12]
    assert find_ticket_column(board, 11) is None


def test_remove_missing_ticket(board):
    assert remove_ticket(board, 99) is None


def test_place_ticket_moves_between_columns(board, make_ticket):
    place_ticket(board, "cerrado", make_ticket(10, estado=4))
    snapshot = board_snapshot(board)
    assert snapshot["abierto"] == [11, 12]
    assert snapshot["cerrado"] == [10]
    assert find_ticket_column(board, 10).key == "cerrado"


def test_place_ticket_at_position(board, make_ticket):
    place_ticket(board, "abierto", make_ticket(30), 0)
    assert board_snapshot(board)["abierto"] == [30, 10, 11, 12]


def test_ticket_lives_in_one_column(board, make_ticket):
    place_ticket(board, "en progreso", make_ticket(10, estado=2))
    place_ticket(board, "cerrado", make_ticket(10, estado=4))
    ids = [tid for tickets in board_snapshot(board).values() for tid in tickets]
    assert ids.count(10) == 1


def test_reorder_ticket(board):
    reorder_ticket(board, 12, 0)
    assert board_snapshot(board)["abierto"] == [12, 10, 11]


def test_set_column_tickets_replaces(board, make_ticket):
    set_column_tickets(board, "abierto", [make_ticket(12), make_ticket(13)])
    assert board_snapshot(board)["abierto"] == [12, 13]
    assert find_ticket_column(board, 10) is None
    assert find_ticket_column(board, 13).key == "abierto"


def test_column_label(board):
    assert column_label(board, "en revision") == "En Revisión"
    assert column_label(board, "unknown") == "unknown"


def test_replace_board_keeps_watchers_and_bumps_generation(board, make_ticket):
    other = new_board()
    other.statuses["abierto"] = 1
    other.labels["abierto"] = "Abierto"
    set_column_tickets(other, "abierto", [make_ticket(50)])

    calls = []
    board.watch("columns", lambda *a: calls.append(a))
    replace_board(board, other)

    assert board_snapshot(board) == {"abierto": [50]}
    assert board.generation == 1
    assert find_ticket_column(board, 50).key == "abierto"
    assert find_ticket_column(board, 10) is None
    assert calls


def test_place_ticket_refuses_column_without_status(board, make_ticket, caplog):
    before = board_snapshot(board)
    with caplog.at_level(logging.WARNING, logger="ticketboard.model.board"):
        assert place_ticket(board, "archivado", make_ticket(10, estado=9)) is False

    assert board_snapshot(board) == before
    assert "archivado" not in board.columns
    assert find_ticket_column(board, 10).key == "abierto"
    assert "no status code" in caplog.text


def test_place_ticket_reports_success(board, make_ticket):
    assert place_ticket(board, "cerrado", make_ticket(10, estado=4)) is True
