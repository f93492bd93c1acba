"""Main Textual application for ticketboard."""

import asyncio

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from ticketboard.api import ApiClient
from ticketboard.errors import ApiError, LoadError
from ticketboard.model.loader import load_board
from ticketboard.model.node import Node
from ticketboard.models import User
from ticketboard.ui.board import BoardScreen


class LoginScreen(ModalScreen[User | None]):
    """Modal asking for credentials. Dismisses with the logged-in user.

    "Register" first reveals the name fields, then creates the account.
    """

    CSS = """
    LoginScreen {
        align: center middle;
    }
    #dialog {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }
    #register-fields {
        height: auto;
        display: none;
    }
    LoginScreen.registering #register-fields {
        display: block;
    }
    #buttons {
        width: 100%;
        height: 3;
        align: center middle;
    }
    Button {
        margin: 0 1;
    }
    """

    def __init__(self, client: ApiClient, email: str | None = None):
        super().__init__()
        self.client = client
        self.email = email or ""
        self.registering = False

    def compose(self) -> ComposeResult:
        with Vertical(id="dialog"):
            yield Static("Sign in", id="message")
            with Vertical(id="register-fields"):
                yield Input(placeholder="Name", id="name")
                yield Input(placeholder="First surname", id="surname1")
                yield Input(placeholder="Second surname", id="surname2")
            yield Input(value=self.email, placeholder="Email", id="email")
            yield Input(placeholder="Password", password=True, id="password")
            with Horizontal(id="buttons"):
                yield Button("Sign in", id="login", variant="primary")
                yield Button("Register", id="register")
                yield Button("Quit", id="quit")

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "quit":
            self.dismiss(None)
        elif event.button.id == "register":
            if self.registering:
                await self._register()
            else:
                self._show_registration(True)
        elif self.registering:
            self._show_registration(False)
        else:
            await self._login()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if self.registering:
            await self._register()
        else:
            await self._login()

    def _show_registration(self, registering: bool) -> None:
        self.registering = registering
        self.set_class(registering, "registering")
        self.query_one("#message", Static).update("Create an account" if registering else "Sign in")

    def _value(self, input_id: str) -> str:
        return self.query_one(f"#{input_id}", Input).value.strip()

    async def _login(self) -> None:
        email = self._value("email")
        password = self.query_one("#password", Input).value
        try:
            user = await asyncio.to_thread(self.client.login, email, password)
        except (ApiError, ValueError) as e:
            self.notify(str(e), title="Sign in failed", severity="error")
            return
        self.dismiss(user)

    async def _register(self) -> None:
        name, surname1 = self._value("name"), self._value("surname1")
        email = self._value("email")
        password = self.query_one("#password", Input).value
        if not (name and surname1 and email and password):
            self.notify("Name, first surname, email and password are required", severity="warning")
            return
        try:
            user = await asyncio.to_thread(
                self.client.register, email, password, name, surname1, self._value("surname2")
            )
        except (ApiError, ValueError) as e:
            self.notify(str(e), title="Registration failed", severity="error")
            return
        self.dismiss(user)


class TicketBoardApp(App):
    """Support ticket kanban board TUI."""

    CSS = """
    Tooltip {
        padding: 0 1;
        margin: 0;
    }
    #loading {
        width: 100%;
        height: 100%;
        content-align: center middle;
    }
    """

    TITLE = "ticketboard"
    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
        ("ctrl+r", "retry", "Retry"),
    ]

    def __init__(self, config: dict, client: ApiClient | None = None):
        super().__init__()
        self.config = config
        self.client = client or ApiClient(config["api_url"], timeout=config["timeout"])
        self.user: User | None = None
        self.board: Node | None = None

    def compose(self) -> ComposeResult:
        yield Static("Loading…", id="loading")

    async def on_mount(self) -> None:
        if self.config.get("user_id") is not None:
            self.user = User(id=self.config["user_id"])
        elif self.config.get("email") and self.config.get("password"):
            try:
                self.user = await asyncio.to_thread(self.client.login, self.config["email"], self.config["password"])
            except (ApiError, ValueError) as e:
                self.notify(str(e), title="Sign in failed", severity="error")

        if self.user is None:
            self.push_screen(LoginScreen(self.client, self.config.get("email")), self._on_login)
        else:
            await self._load_board()

    async def _on_login(self, user: User | None) -> None:
        if user is None:
            self.exit()
            return
        self.user = user
        await self._load_board()

    async def _load_board(self) -> None:
        """Load the board and show it. On failure, stay put and offer a retry."""
        loading = self.query_one("#loading", Static)
        loading.update("Loading…")
        try:
            self.board = await load_board(self.client)
        except LoadError as e:
            loading.update("Could not load the board. Press ctrl+r to retry.")
            self.notify(str(e), title="Load failed", severity="error")
            return
        self.push_screen(BoardScreen(self.board, self.client, self.user))

    async def action_retry(self) -> None:
        if self.board is None and self.user is not None:
            await self._load_board()
