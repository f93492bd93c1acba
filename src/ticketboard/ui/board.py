"""Board screen showing status columns and their tickets."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Footer, Static

from ticketboard.drag import CardDragManager
from ticketboard.errors import LoadError, SyncError
from ticketboard.model.loader import reload_board
from ticketboard.model.node import Node
from ticketboard.models import ColumnMove, Ticket, User
from ticketboard.sync import MoveReconciler, PendingMove
from ticketboard.ui.card import TicketCard
from ticketboard.ui.column import ColumnWidget
from ticketboard.ui.constants import ICON_SYNC_FAILED, ICON_SYNC_IDLE, ICON_SYNC_PENDING, ICON_USER
from ticketboard.ui.detail import CreateTicketModal, TicketDetailModal
from ticketboard.ui.watcher import NodeWatcherMixin

SYNC_ICONS = {
    "idle": ICON_SYNC_IDLE,
    "pending": ICON_SYNC_PENDING,
    "failed": ICON_SYNC_FAILED,
}


class BoardScreen(NodeWatcherMixin, Screen):
    """Main board screen showing all columns."""

    DEFAULT_CSS = """
    BoardScreen {
        layers: base overlay;
    }
    #board-header {
        height: 1;
        width: 100%;
        background: $panel;
    }
    #board-title {
        width: 1fr;
        text-style: bold;
        padding: 0 1;
    }
    #board-user, #sync-status {
        width: auto;
        padding: 0 1;
    }
    #columns {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        ("r", "reload", "Reload"),
        ("n", "new_ticket", "New ticket"),
    ]

    def __init__(self, board: Node, client, user: User):
        self._init_watcher()
        super().__init__()
        self.board = board
        self.client = client
        self.user = user
        self.drag = CardDragManager(board)
        self.reconciler = MoveReconciler(board, client, user.id)
        self._active_draggable = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="board-header"):
            yield Static("Tickets", id="board-title")
            yield Static(f"{ICON_USER} {self.user.display_name}", id="board-user")
            yield Static(SYNC_ICONS.get(self.board.sync.status, ICON_SYNC_IDLE), id="sync-status")
        with Horizontal(id="columns"):
            for column in self.board.columns:
                yield ColumnWidget(column, self.board)
        yield Footer()

    def on_mount(self) -> None:
        self.node_watch(self.board, "columns", self._on_columns_changed)
        self.node_watch(self.board.sync, "status", self._on_sync_changed)

    def _on_columns_changed(self, node, key, old, new) -> None:
        """Rebuild column widgets when columns are added, removed or replaced."""
        if node is self.board.columns:
            self.call_later(self._sync_columns)

    async def _sync_columns(self) -> None:
        container = self.query_one("#columns", Horizontal)
        shown = [w.column for w in container.query(ColumnWidget)]
        if shown == list(self.board.columns):
            return
        await container.remove_children()
        await container.mount_all(ColumnWidget(column, self.board) for column in self.board.columns)

    def _on_sync_changed(self, node, key, old, new) -> None:
        self.query_one("#sync-status", Static).update(SYNC_ICONS.get(new, ICON_SYNC_IDLE))

    # -- Thin delegation: screen routes mouse events to active draggable --

    def on_mouse_move(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_move(event.screen_x, event.screen_y)

    def on_mouse_up(self, event) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_finish(event.screen_x, event.screen_y)

    def action_cancel_drag(self) -> None:
        if self._active_draggable is not None:
            self._active_draggable._drag_cancel()

    # -- Ticket gestures --

    def on_ticket_card_drag_started(self, event: TicketCard.DragStarted) -> None:
        event.stop()
        self.drag.start(event.card.ticket_id)

    def on_ticket_card_dropped(self, event: TicketCard.Dropped) -> None:
        event.stop()
        self.drop_ticket(event.card.ticket_id, event.target_id)

    def drop_ticket(self, ticket_id: int, target_id: str | None) -> None:
        """Resolve a drop and, for column moves, start saving it."""
        move = self.drag.finish(ticket_id, target_id)
        if isinstance(move, ColumnMove):
            pending = self.reconciler.begin(move)
            self.run_worker(self._save_move(pending), group="moves")

    async def _save_move(self, pending: PendingMove) -> None:
        try:
            await self.reconciler.confirm(pending)
        except SyncError as e:
            self.notify(str(e), title="Move failed", severity="error")

    def on_ticket_card_opened(self, event: TicketCard.Opened) -> None:
        event.stop()
        self.open_ticket(event.card.ticket)

    def open_ticket(self, ticket: Ticket) -> None:
        """Show a ticket's details. Reload afterwards if it was commented on."""
        self.app.push_screen(TicketDetailModal(ticket, self.board, self.client, self.user), self._on_detail_closed)

    async def _on_detail_closed(self, updated: bool | None) -> None:
        if updated:
            await self.action_reload()

    # -- Reload and creation --

    async def action_reload(self) -> None:
        try:
            await reload_board(self.board, self.client)
        except LoadError as e:
            self.notify(str(e), title="Reload failed", severity="error")

    def action_new_ticket(self) -> None:
        self.app.push_screen(CreateTicketModal(self.client, self.user), self._on_ticket_created)

    async def _on_ticket_created(self, created: bool | None) -> None:
        if created:
            await self.action_reload()
