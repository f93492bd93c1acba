"""Shared helpers for CLI command handlers."""

import asyncio
import json
import sys

from ticketboard.api import ApiClient
from ticketboard.config import read_config
from ticketboard.errors import ApiError, LoadError
from ticketboard.model.board import column_label
from ticketboard.model.loader import load_board
from ticketboard.model.node import Node
from ticketboard.normalize import normalize_status


def settings(args) -> dict:
    """Config merged with command-line overrides."""
    config = read_config()
    if getattr(args, "api_url", None):
        config["api_url"] = args.api_url
    if getattr(args, "user", None) is not None:
        config["user_id"] = args.user
    return config


def make_client(config: dict) -> ApiClient:
    return ApiClient(config["api_url"], timeout=config["timeout"])


def load_board_or_die(client, json_mode: bool) -> Node:
    """Load the board from the backend. Exit 1 with message on failure."""
    try:
        return asyncio.run(load_board(client))
    except LoadError as e:
        error(str(e), json_mode)


def acting_user_id(config: dict, client, json_mode: bool) -> int:
    """The user id status changes are recorded under.

    Uses the configured id, or logs in with configured credentials.
    """
    if config.get("user_id") is not None:
        return config["user_id"]
    if config.get("email") and config.get("password"):
        try:
            return client.login(config["email"], config["password"]).id
        except (ApiError, ValueError) as e:
            error(f"login failed: {e}", json_mode)
    error("no user: pass --user or set TICKETBOARD_USER_ID", json_mode)


def find_column(board: Node, name: str, json_mode: bool) -> Node:
    """Lookup column by label or key. Exit 1 listing available columns if not found."""
    col = board.columns[normalize_status(name)]
    if col is not None:
        return col
    available = [f"  {c['key']:<16} {c['label']}" for c in build_column_summaries(board)]
    msg = f"Column '{name}' not found. Available:\n" + "\n".join(available)
    error(msg, json_mode)


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)


def build_column_summaries(board: Node) -> list[dict]:
    """Build column summary dicts from board."""
    return [
        {
            "key": key,
            "label": column_label(board, key),
            "status": board.statuses[key],
            "tickets": len(col.tickets),
        }
        for key, col in board.columns.items()
    ]


def format_column_line(c: dict, indent: str = "") -> str:
    """Format a column summary dict as a text line."""
    tickets = "ticket" if c["tickets"] == 1 else "tickets"
    status = "-" if c["status"] is None else c["status"]
    return f"{indent}{status:>3}  {c['label']:<16} {c['tickets']} {tickets}"
