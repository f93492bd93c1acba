"""Shared fixtures for CLI tests."""

import os

import pytest


@pytest.fixture
def backend(client, monkeypatch, tmp_path):
    """Point every CLI command at the fake backend with an empty config."""
    for name in list(os.environ):
        if name.startswith("TICKETBOARD_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("TICKETBOARD_CONFIG", str(tmp_path / "config.yaml"))
    monkeypatch.setattr("ticketboard.cli.board.make_client", lambda config: client)
    monkeypatch.setattr("ticketboard.cli.ticket.make_client", lambda config: client)
    return client
