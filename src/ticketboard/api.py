"""HTTP client for the ticket backend."""

from __future__ import annotations

from typing import Any

import requests

from ticketboard.errors import ApiError
from ticketboard.models import Status, Ticket, User

API_PREFIX = "/api/v1"


class ApiClient:
    """Blocking client for the ticket REST API.

    Every response is a ``{success, message, data}`` envelope; methods
    return the unwrapped ``data``. Callers on the event loop run these in
    a worker thread.
    """

    def __init__(self, base_url: str = "http://localhost:3001", timeout: float = 10, token: str = ""):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.session = requests.Session()
        self.session.headers["Content-Type"] = "application/json"

    def _request(self, method: str, path: str, json: Any = None, auth: bool = False) -> Any:
        headers = {}
        if auth and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        url = f"{self.base_url}{API_PREFIX}{path}"
        try:
            r = self.session.request(method, url, json=json, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        try:
            body = r.json()
        except ValueError as e:
            raise ApiError(f"{method} {path}: invalid JSON response", status=r.status_code) from e

        if not r.ok:
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(message or f"HTTP error! status: {r.status_code}", status=r.status_code)
        return body

    def _data(self, method: str, path: str, json: Any = None, auth: bool = False) -> Any:
        body = self._request(method, path, json=json, auth=auth)
        return body.get("data") if isinstance(body, dict) else None

    # --- board ---

    def fetch_statuses(self) -> list[Status]:
        """The status catalogue."""
        data = self._data("GET", "/estado") or []
        if not isinstance(data, list):
            raise ApiError("status list is not a list")
        return [Status.from_api(raw) for raw in data]

    def fetch_tickets_grouped(self) -> dict[str, list[Ticket]]:
        """Tickets grouped by the backend's own status names."""
        data = self._data("GET", "/ticket") or {}
        if not isinstance(data, dict):
            raise ApiError("ticket groups are not an object")
        grouped = {}
        for label, tickets in data.items():
            if not isinstance(tickets, list):
                raise ApiError(f"ticket group {label!r} is not a list")
            grouped[label] = [Ticket.from_api(raw) for raw in tickets]
        return grouped

    def update_ticket_status(self, ticket_id: int, status_code: int, user_id: int) -> Any:
        return self._data(
            "PATCH",
            f"/ticket/{ticket_id}/estado",
            json={"nuevoEstado": status_code, "idUsuario": user_id},
        )

    # --- collaborators outside the board engine ---

    def login(self, email: str, password: str) -> User:
        user = User.from_api(self._data("POST", "/auth/login", json={"correo": email, "password": password}) or {})
        self.token = user.token
        return user

    def register(self, email: str, password: str, name: str, surname1: str, surname2: str = "") -> User:
        payload = {
            "correo": email,
            "password": password,
            "nombre": name,
            "apellido1": surname1,
            "apellido2": surname2,
        }
        user = User.from_api(self._data("POST", "/auth/registro", json=payload) or {})
        self.token = user.token
        return user

    def create_ticket(
        self,
        title: str,
        description: str,
        client_id: int,
        kind: int = 1,
        priority: int = 1,
        department_id: int = 1,
        support_id: int | None = None,
    ) -> dict[str, Any]:
        payload = {
            "titulo": title,
            "descripcion": description,
            "tipoTicket": kind,
            "prioridad": priority,
            "idDepartamento": department_id,
            "idCliente": client_id,
            "idSoporte": support_id,
        }
        return self._data("POST", "/ticket", json=payload, auth=True) or {}

    def fetch_comments(self, ticket_id: int) -> list[dict[str, Any]]:
        return self._data("GET", f"/ticket/{ticket_id}/comentario") or []

    def add_comment(self, ticket_id: int, text: str, author_id: int) -> Any:
        return self._data(
            "POST",
            f"/ticket/{ticket_id}/comentario",
            json={"comentario": text, "idAutor": author_id},
            auth=True,
        )
