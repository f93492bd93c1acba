"""Column widgets for the board."""

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Rule, Static

from ticketboard.model.board import column_label
from ticketboard.model.node import Node
from ticketboard.ui.card import TicketCard
from ticketboard.ui.constants import EMPTY_COLUMN_HINT
from ticketboard.ui.drag import DropTarget
from ticketboard.ui.watcher import NodeWatcherMixin


class ColumnWidget(NodeWatcherMixin, DropTarget, VerticalScroll):
    """A single status column on the board."""

    DEFAULT_CSS = """
    ColumnWidget {
        width: 1fr;
        height: 100%;
        min-width: 25;
        padding: 0 1;
        border-right: tall $surface-lighten-1;
    }
    ColumnWidget.drop-target {
        background: $boost;
    }
    ColumnWidget > .column-title {
        width: 100%;
        text-align: center;
        text-style: bold;
    }
    ColumnWidget > Rule.-horizontal {
        margin: 0;
    }
    ColumnWidget > .column-empty {
        width: 100%;
        color: $text-muted;
        text-align: center;
        border: dashed $surface-lighten-2;
        padding: 1 0;
    }
    """

    def __init__(self, column: Node, board: Node):
        self._init_watcher()
        super().__init__()
        self.column = column
        self.board = board
        self._recompose_queued = False

    @property
    def key(self) -> str:
        return self.column.key

    def compose(self) -> ComposeResult:
        count = len(self.column.tickets)
        yield Static(f"{column_label(self.board, self.key)} ({count})", classes="column-title")
        yield Rule()
        for ticket in self.column.tickets:
            yield TicketCard(ticket)
        if not count:
            yield Static(EMPTY_COLUMN_HINT, classes="column-empty")

    def on_mount(self) -> None:
        self.node_watch(self.column, "tickets", self._on_tickets_changed)

    def _on_tickets_changed(self, node, key, old, new) -> None:
        if not self._recompose_queued:
            self._recompose_queued = True
            self.call_later(self._refresh_tickets)

    async def _refresh_tickets(self) -> None:
        self._recompose_queued = False
        await self.recompose()

    def cards(self) -> list[TicketCard]:
        return [c for c in self.children if isinstance(c, TicketCard)]

    def _card_at(self, draggable, x: int, y: int) -> TicketCard | None:
        for card in self.cards():
            if card is not draggable and card.region.contains(x, y):
                return card
        return None

    # -- DropTarget --

    def drag_over(self, draggable, x: int, y: int) -> None:
        self.add_class("drop-target")
        hovered = self._card_at(draggable, x, y)
        for card in self.cards():
            card.set_class(card is hovered, "drop-before")

    def drag_away(self, draggable) -> None:
        self.remove_class("drop-target")
        for card in self.cards():
            card.remove_class("drop-before")

    def drop_id(self, draggable, x: int, y: int) -> str | None:
        card = self._card_at(draggable, x, y)
        if card is not None:
            return str(card.ticket_id)
        return self.key
