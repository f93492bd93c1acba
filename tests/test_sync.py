"""Tests for optimistic column moves and rollback."""

import asyncio
import threading

import pytest

from ticketboard.drag import CardDragManager
from ticketboard.errors import ApiError, SyncError
from ticketboard.model.board import board_snapshot, find_ticket, find_ticket_column
from ticketboard.model.loader import reload_board
from ticketboard.sync import MoveReconciler

USER_ID = 7


def _move(board, ticket_id, target):
    drag = CardDragManager(board)
    drag.start(ticket_id)
    return drag.finish(ticket_id, target)


async def _wait_for_calls(client, count):
    for _ in range(200):
        if len(client.updates) >= count:
            return
        await asyncio.sleep(0.01)
    raise AssertionError(f"expected {count} update calls, got {client.updates}")


@pytest.mark.asyncio
async def test_column_move_is_optimistic(board, client):
    client.gate = threading.Event()
    reconciler = MoveReconciler(board, client, USER_ID)
    task = asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado")))
    await _wait_for_calls(client, 1)

    snapshot = board_snapshot(board)
    assert 10 not in snapshot["abierto"]
    assert snapshot["cerrado"] == [10]
    assert find_ticket(board, 10).estado == 4
    assert board.sync.status == "pending"
    assert reconciler.in_flight == 1

    client.gate.set()
    assert await task is True
    assert client.updates == [(10, 4, USER_ID)]
    assert board.sync.status == "idle"
    assert reconciler.in_flight == 0


@pytest.mark.asyncio
async def test_failed_move_rolls_back(board, client):
    before = board_snapshot(board)
    client.update_error = ApiError("HTTP error! status: 500", status=500)
    reconciler = MoveReconciler(board, client, USER_ID)
    move = _move(board, 11, "cerrado")

    with pytest.raises(SyncError) as exc_info:
        await reconciler.apply(move)

    assert exc_info.value.move is move
    assert isinstance(exc_info.value.cause, ApiError)
    assert board_snapshot(board) == before
    assert find_ticket(board, 11).estado == 1
    assert find_ticket_column(board, 11).key == "abierto"
    assert client.updates == [(11, 4, USER_ID)]
    assert board.sync.status == "failed"
    assert "500" in board.sync.error


@pytest.mark.asyncio
async def test_reorder_needs_no_backend(board, client):
    reconciler = MoveReconciler(board, client, USER_ID)
    assert await reconciler.apply(_move(board, 12, 10)) is True
    assert client.updates == []


@pytest.mark.asyncio
async def test_moves_of_one_ticket_are_serialized(board, client):
    client.gate = threading.Event()
    reconciler = MoveReconciler(board, client, USER_ID)

    first = asyncio.create_task(reconciler.apply(_move(board, 10, "en progreso")))
    await _wait_for_calls(client, 1)
    second = asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado")))
    await asyncio.sleep(0.05)

    # The second move shows right away but waits for the first to be saved
    assert find_ticket_column(board, 10).key == "cerrado"
    assert len(client.updates) == 1

    client.gate.set()
    await asyncio.gather(first, second)
    assert client.updates == [(10, 2, USER_ID), (10, 4, USER_ID)]
    assert find_ticket(board, 10).estado == 4


@pytest.mark.asyncio
async def test_moves_of_different_tickets_run_together(board, client):
    client.gate = threading.Event()
    reconciler = MoveReconciler(board, client, USER_ID)

    tasks = [
        asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado"))),
        asyncio.create_task(reconciler.apply(_move(board, 11, "cerrado"))),
    ]
    await _wait_for_calls(client, 2)
    assert reconciler.in_flight == 2

    client.gate.set()
    await asyncio.gather(*tasks)
    assert board_snapshot(board)["cerrado"] == [10, 11]


@pytest.mark.asyncio
async def test_rollback_goes_to_last_accepted_placement(board, client):
    client.gate = threading.Event()
    client.update_errors = {1: ApiError("rejected")}
    reconciler = MoveReconciler(board, client, USER_ID)

    first = asyncio.create_task(reconciler.apply(_move(board, 10, "en progreso")))
    await _wait_for_calls(client, 1)
    second = asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado")))
    await asyncio.sleep(0)

    client.gate.set()
    assert await first is True
    with pytest.raises(SyncError):
        await second

    assert find_ticket_column(board, 10).key == "en progreso"
    assert find_ticket(board, 10).estado == 2
    assert board_snapshot(board)["en progreso"] == [20, 10]
    assert board.sync.status == "failed"


@pytest.mark.asyncio
async def test_early_failure_waits_for_later_moves(board, client):
    client.gate = threading.Event()
    client.update_errors = {0: ApiError("rejected")}
    reconciler = MoveReconciler(board, client, USER_ID)

    first = asyncio.create_task(reconciler.apply(_move(board, 10, "en progreso")))
    await _wait_for_calls(client, 1)
    second = asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado")))
    await asyncio.sleep(0)

    client.gate.set()
    with pytest.raises(SyncError):
        await first
    # Not rolled back underneath the newer move
    assert find_ticket_column(board, 10).key == "cerrado"

    assert await second is True
    assert find_ticket_column(board, 10).key == "cerrado"
    assert find_ticket(board, 10).estado == 4
    assert board.sync.status == "idle"


@pytest.mark.asyncio
async def test_failure_after_reload_keeps_fresh_board(board, client, make_ticket):
    client.gate = threading.Event()
    client.update_error = ApiError("rejected")
    reconciler = MoveReconciler(board, client, USER_ID)

    task = asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado")))
    await _wait_for_calls(client, 1)

    client.grouped = {"Cerrado": [make_ticket(10, estado=4)]}
    await reload_board(board, client)
    fresh = board_snapshot(board)

    client.gate.set()
    with pytest.raises(SyncError):
        await task

    assert board_snapshot(board) == fresh
    assert find_ticket_column(board, 10).key == "cerrado"


@pytest.mark.asyncio
async def test_cancelled_move_releases_ticket(board, client):
    client.gate = threading.Event()
    reconciler = MoveReconciler(board, client, USER_ID)

    task = asyncio.create_task(reconciler.apply(_move(board, 10, "cerrado")))
    await _wait_for_calls(client, 1)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    client.gate.set()

    assert reconciler.in_flight == 0


@pytest.mark.asyncio
async def test_begin_moves_ticket_before_saving(board, client):
    reconciler = MoveReconciler(board, client, USER_ID)
    pending = reconciler.begin(_move(board, 10, "cerrado"))

    assert board_snapshot(board)["cerrado"] == [10]
    assert find_ticket(board, 10).estado == 4
    assert client.updates == []
    assert reconciler.in_flight == 1

    assert await reconciler.confirm(pending) is True
    assert client.updates == [(10, 4, USER_ID)]
    assert reconciler.in_flight == 0
