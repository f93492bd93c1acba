"""Ticket card widgets."""

from textual.app import ComposeResult
from textual.message import Message
from textual.widgets import Static

from ticketboard.models import Ticket
from ticketboard.ui.constants import ICON_TICKET, PRIORITY_ICONS
from ticketboard.ui.drag import DraggableMixin


def _footer_text(ticket: Ticket) -> str:
    parts = [f"{ICON_TICKET} {ticket.id}"]
    if ticket.priority in PRIORITY_ICONS:
        parts.append(PRIORITY_ICONS[ticket.priority])
    assignee = ticket.data.get("soporteAsignado")
    if isinstance(assignee, dict) and assignee.get("nombre"):
        parts.append(assignee["nombre"])
    return "  ".join(parts)


class PlainStatic(Static):
    """Static that doesn't allow text selection."""

    ALLOW_SELECT = False


class DragGhost(Static):
    """Floating overlay showing the ticket being dragged."""

    DEFAULT_CSS = """
    DragGhost {
        layer: overlay;
        height: auto;
        padding: 0 1;
        background: $primary;
        border: solid $accent;
    }
    """


class TicketCard(DraggableMixin, Static, can_focus=True):
    """A single ticket in a column."""

    BINDINGS = [
        ("space", "open_ticket"),
        ("enter", "open_ticket"),
    ]

    DEFAULT_CSS = """
    TicketCard {
        width: 100%;
        height: auto;
        padding: 0 1;
        margin-bottom: 1;
        background: $surface;
    }
    TicketCard:focus {
        background: $primary;
    }
    TicketCard.dragging {
        opacity: 0.4;
    }
    TicketCard.drop-before {
        border-top: thick $accent;
    }
    TicketCard #ticket-footer {
        color: $text-muted;
    }
    """

    class DragStarted(Message):
        """Posted when the card is picked up."""

        def __init__(self, card: "TicketCard") -> None:
            super().__init__()
            self.card = card

    class Dropped(Message):
        """Posted when the card is released over target_id (None: nowhere)."""

        def __init__(self, card: "TicketCard", target_id: str | None) -> None:
            super().__init__()
            self.card = card
            self.target_id = target_id

    class Opened(Message):
        """Posted when the card is clicked or activated."""

        def __init__(self, card: "TicketCard") -> None:
            super().__init__()
            self.card = card

    def __init__(self, ticket: Ticket):
        Static.__init__(self)
        self._init_draggable()
        self.ticket = ticket

    @property
    def ticket_id(self) -> int:
        return self.ticket.id

    def compose(self) -> ComposeResult:
        yield PlainStatic(self.ticket.title, id="ticket-title")
        yield PlainStatic(_footer_text(self.ticket), id="ticket-footer")

    def action_open_ticket(self) -> None:
        self.draggable_clicked()

    def draggable_make_ghost(self):
        return DragGhost(self.ticket.title)

    def draggable_clicked(self) -> None:
        self.post_message(self.Opened(self))

    def draggable_started(self) -> None:
        self.post_message(self.DragStarted(self))

    def draggable_dropped(self, target_id: str | None) -> None:
        self.post_message(self.Dropped(self, target_id))
