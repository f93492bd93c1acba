"""Handlers for 'ticketboard ticket' commands."""

import asyncio

from ticketboard.cli._common import (
    acting_user_id,
    error,
    find_column,
    load_board_or_die,
    make_client,
    output_json,
    output_result,
    settings,
)
from ticketboard.drag import CardDragManager
from ticketboard.errors import ApiError, SyncError
from ticketboard.model.board import column_label, find_ticket_column
from ticketboard.models import ColumnMove
from ticketboard.sync import MoveReconciler


def ticket_list(args) -> int:
    """List tickets grouped by column."""
    client = make_client(settings(args))
    board = load_board_or_die(client, args.json)

    only = find_column(board, args.column, args.json) if args.column else None

    columns = []
    for key, col in board.columns.items():
        if only is not None and col is not only:
            continue
        tickets = [{"id": t.id, "title": t.title, "estado": t.estado} for t in col.tickets]
        columns.append({"key": key, "label": column_label(board, key), "tickets": tickets})

    if args.json:
        items = [
            {**t, "column": {"key": col["key"], "label": col["label"]}} for col in columns for t in col["tickets"]
        ]
        output_json(items)
    else:
        for col in columns:
            print(col["label"])
            for t in col["tickets"]:
                print(f"  {t['id']:>5}  {t['title']}")

    return 0


def ticket_move(args) -> int:
    """Move a ticket to another column and save its new status."""
    config = settings(args)
    client = make_client(config)
    board = load_board_or_die(client, args.json)
    target = find_column(board, args.column, args.json)

    source = find_ticket_column(board, args.id)
    if source is None:
        error(f"Ticket '{args.id}' not found.", args.json)
    if source is target:
        output_result(
            {"id": args.id, "column": target.key, "moved": False},
            f"Ticket {args.id} is already in {column_label(board, target.key)}",
            args.json,
        )
        return 0

    user_id = acting_user_id(config, client, args.json)

    drag = CardDragManager(board)
    drag.start(args.id)
    move = drag.finish(args.id, target.key)
    if not isinstance(move, ColumnMove):
        error(f"Column '{column_label(board, target.key)}' has no status code.", args.json)

    reconciler = MoveReconciler(board, client, user_id)
    try:
        asyncio.run(reconciler.apply(move))
    except SyncError as e:
        error(str(e), args.json)

    label = column_label(board, move.to_column)
    output_result(
        {"id": move.ticket.id, "column": move.to_column, "estado": move.status_code, "moved": True},
        f"Moved ticket {move.ticket.id} to {label}",
        args.json,
    )
    return 0


def ticket_add(args) -> int:
    """Create a ticket reported by the acting user."""
    config = settings(args)
    client = make_client(config)
    user_id = acting_user_id(config, client, args.json)

    try:
        data = client.create_ticket(
            args.title,
            args.description,
            client_id=user_id,
            kind=args.kind,
            priority=args.priority,
            department_id=args.department,
            support_id=user_id,
        )
    except ApiError as e:
        error(str(e), args.json)

    ticket_id = data.get("idTicket") if isinstance(data, dict) else None
    output_result(
        {"id": ticket_id, "title": args.title},
        f"Created ticket {ticket_id}: {args.title}",
        args.json,
    )
    return 0


def ticket_comment(args) -> int:
    """Add a comment to a ticket, or list its comments when no text is given."""
    config = settings(args)
    client = make_client(config)

    if not args.text:
        try:
            comments = client.fetch_comments(args.id)
        except ApiError as e:
            error(str(e), args.json)
        if args.json:
            output_json(comments)
        else:
            for c in comments:
                print(f"{c.get('fechaCreacion', '')}  {c.get('comentario', '')}")
        return 0

    user_id = acting_user_id(config, client, args.json)
    try:
        client.add_comment(args.id, args.text, user_id)
    except ApiError as e:
        error(str(e), args.json)

    output_result({"id": args.id, "comment": args.text}, f"Commented on ticket {args.id}", args.json)
    return 0
