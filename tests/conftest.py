"""Shared fixtures: a fake backend and ticket builders."""

import threading

import pytest

from ticketboard.errors import ApiError
from ticketboard.model.loader import build_board
from ticketboard.models import Status, Ticket, User


def _make_ticket(ticket_id, estado=1, **data):
    """Helper to build a Ticket with a realistic payload."""
    payload = {
        "idTicket": ticket_id,
        "titulo": f"Ticket {ticket_id}",
        "descripcion": "",
        "prioridad": 1,
        "estado": estado,
        "activo": True,
    }
    payload.update(data)
    return Ticket.from_api(payload)


class FakeClient:
    """Stands in for ApiClient; records calls and fails on request."""

    def __init__(self, statuses=None, grouped=None):
        self.statuses = statuses if statuses is not None else []
        self.grouped = grouped if grouped is not None else {}
        self.updates: list[tuple[int, int, int]] = []
        self.statuses_error: Exception | None = None
        self.tickets_error: Exception | None = None
        self.update_error: Exception | None = None
        self.update_errors: dict[int, Exception] = {}
        self.gate: threading.Event | None = None
        self.created: list[dict] = []
        self.registered: list[tuple] = []
        self.comments: dict[int, list[dict]] = {}

    def fetch_statuses(self):
        if self.statuses_error:
            raise self.statuses_error
        return list(self.statuses)

    def fetch_tickets_grouped(self):
        if self.tickets_error:
            raise self.tickets_error
        return {label: list(tickets) for label, tickets in self.grouped.items()}

    def update_ticket_status(self, ticket_id, status_code, user_id):
        call = len(self.updates)
        self.updates.append((ticket_id, status_code, user_id))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        error = self.update_errors.get(call, self.update_error)
        if error:
            raise error
        return {"idTicket": ticket_id, "estado": status_code}

    def login(self, email, password):
        if password != "secret":
            raise ApiError("Credenciales inválidas", status=401)
        return User(id=7, name="Ana", surname="Solis", email=email, token="tok")

    def register(self, email, password, name, surname1, surname2=""):
        self.registered.append((email, name, surname1, surname2))
        return User(id=8, name=name, surname=surname1, email=email, token="new")

    def create_ticket(self, title, description, client_id, **kwargs):
        data = {"idTicket": 100 + len(self.created), "titulo": title, "descripcion": description, "idCliente": client_id}
        data.update(kwargs)
        self.created.append(data)
        return data

    def fetch_comments(self, ticket_id):
        return list(self.comments.get(ticket_id, []))

    def add_comment(self, ticket_id, text, author_id):
        self.comments.setdefault(ticket_id, []).append({"comentario": text, "idAutor": author_id})
        return {"comentario": text}


@pytest.fixture
def make_ticket():
    return _make_ticket


@pytest.fixture
def statuses():
    return [
        Status(1, "Abierto"),
        Status(2, "En Progreso"),
        Status(3, "En Revisión"),
        Status(4, "Cerrado"),
    ]


@pytest.fixture
def client(statuses):
    """A backend with three open tickets and one in progress."""
    return FakeClient(
        statuses=statuses,
        grouped={
            "abierto": [_make_ticket(10), _make_ticket(11), _make_ticket(12)],
            "En progreso": [_make_ticket(20, estado=2)],
        },
    )


@pytest.fixture
def board(client):
    """The client's data merged into a board."""
    return build_board(client.fetch_statuses(), client.fetch_tickets_grouped())
