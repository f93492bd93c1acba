"""Modals for ticket details, comments and ticket creation."""

import asyncio

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Select, Static

from ticketboard.errors import ApiError
from ticketboard.model.board import column_label, find_ticket_column
from ticketboard.model.node import Node
from ticketboard.models import Ticket, User
from ticketboard.ui.constants import DEPARTMENTS, ICON_COMMENT, PRIORITIES, TICKET_KINDS


def _person(raw) -> str:
    if not isinstance(raw, dict):
        return "-"
    return f"{raw.get('nombre', '')} {raw.get('apellido1', '')}".strip() or "-"


def _describe(raw, key: str) -> str:
    return raw.get(key, "-") if isinstance(raw, dict) else "-"


def ticket_fields(ticket: Ticket, status_label: str) -> list[tuple[str, str]]:
    """Label/value rows shown in the detail view."""
    data = ticket.data
    return [
        ("Status", status_label),
        ("Priority", _describe(data.get("nivelPrioridad"), "descripcionPrioridad")),
        ("Category", _describe(data.get("categoriaTicket"), "descripcionTipo")),
        ("Department", _describe(data.get("departamentoAsignado"), "descripcionDepartamento")),
        ("Reported by", _person(data.get("clienteReporta"))),
        ("Assigned to", _person(data.get("soporteAsignado"))),
        ("Created", data.get("fechaCreacion") or "-"),
        ("Updated", data.get("fechaActualizacion") or "-"),
    ]


class TicketDetailModal(ModalScreen[bool]):
    """Ticket details with its comment thread.

    Dismisses True when a comment was added, so the board can reload.
    """

    DEFAULT_CSS = """
    TicketDetailModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.6);
    }
    #detail-container {
        width: 80%;
        height: 80%;
        background: $surface;
        padding: 1 2;
    }
    #detail-title {
        text-style: bold;
        margin-bottom: 1;
    }
    #comments {
        height: 1fr;
        border-top: solid $primary;
    }
    """

    BINDINGS = [("escape", "close", "Close")]

    def __init__(self, ticket: Ticket, board: Node, client, user: User):
        super().__init__()
        self.ticket = ticket
        self.board = board
        self.client = client
        self.user = user
        self.commented = False

    def compose(self) -> ComposeResult:
        column = find_ticket_column(self.board, self.ticket.id)
        status_label = column_label(self.board, column.key) if column is not None else str(self.ticket.estado)
        with Vertical(id="detail-container"):
            yield Static(f"#{self.ticket.id} {self.ticket.title}", id="detail-title")
            yield Static(self.ticket.data.get("descripcion") or "", id="detail-description")
            for label, value in ticket_fields(self.ticket, status_label):
                yield Static(f"{label}: {value}", classes="detail-field")
            yield VerticalScroll(id="comments")
            yield Input(placeholder=f"{ICON_COMMENT} Add a comment", id="comment-input")

    def on_mount(self) -> None:
        self.run_worker(self._load_comments(), exclusive=True)

    async def _load_comments(self) -> None:
        try:
            comments = await asyncio.to_thread(self.client.fetch_comments, self.ticket.id)
        except ApiError as e:
            self.notify(str(e), title="Comments unavailable", severity="warning")
            return
        container = self.query_one("#comments", VerticalScroll)
        await container.remove_children()
        await container.mount_all(
            Static(f"{_person(c.get('autorComentario'))}: {c.get('comentario', '')}", classes="comment")
            for c in comments
        )

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        text = event.value.strip()
        if not text:
            return
        try:
            await asyncio.to_thread(self.client.add_comment, self.ticket.id, text, self.user.id)
        except ApiError as e:
            self.notify(str(e), title="Comment failed", severity="error")
            return
        self.commented = True
        event.input.value = ""
        await self._load_comments()

    def action_close(self) -> None:
        self.dismiss(self.commented)


class CreateTicketModal(ModalScreen[bool]):
    """Form for a new ticket. Dismisses True once the backend created it."""

    DEFAULT_CSS = """
    CreateTicketModal {
        align: center middle;
        background: rgba(0, 0, 0, 0.6);
    }
    #create-form {
        width: 70;
        height: auto;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }
    #create-buttons {
        height: 3;
        align: center middle;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, client, user: User):
        super().__init__()
        self.client = client
        self.user = user

    def compose(self) -> ComposeResult:
        with Vertical(id="create-form"):
            yield Input(placeholder="Title", id="title")
            yield Input(placeholder="Description", id="description")
            yield Select(TICKET_KINDS, value=1, allow_blank=False, prompt="Type", id="kind")
            yield Select(PRIORITIES, value=1, allow_blank=False, prompt="Priority", id="priority")
            yield Select(DEPARTMENTS, value=1, allow_blank=False, prompt="Department", id="department")
            with Horizontal(id="create-buttons"):
                yield Button("Create", id="create", variant="primary")
                yield Button("Cancel", id="cancel")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(False)
            return
        title = self.query_one("#title", Input).value.strip()
        if not title:
            self.notify("A title is required", severity="warning")
            return
        description = self.query_one("#description", Input).value.strip()
        try:
            await asyncio.to_thread(
                self.client.create_ticket,
                title,
                description,
                client_id=self.user.id,
                kind=self.query_one("#kind", Select).value,
                priority=self.query_one("#priority", Select).value,
                department_id=self.query_one("#department", Select).value,
                support_id=self.user.id,
            )
        except ApiError as e:
            self.notify(str(e), title="Could not create ticket", severity="error")
            return
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
