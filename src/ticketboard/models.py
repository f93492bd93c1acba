"""Data models for ticket boards."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Ticket:
    """A ticket as the backend sent it.

    ``data`` is the whole backend payload. Only ``idTicket`` and ``estado``
    are interpreted; everything else rides along untouched.
    """

    id: int
    estado: int
    data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Ticket:
        """Build a Ticket from a backend dict. Raises ValueError on bad ids."""
        if not isinstance(raw, dict):
            raise ValueError(f"ticket must be an object, got {type(raw).__name__}")
        try:
            ticket_id = int(raw["idTicket"])
            estado = int(raw["estado"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"malformed ticket: {raw!r}") from e
        return cls(id=ticket_id, estado=estado, data=copy.deepcopy(raw))

    def to_api(self) -> dict[str, Any]:
        """Return the backend payload, with idTicket and estado in sync."""
        data = copy.deepcopy(self.data)
        data["idTicket"] = self.id
        data["estado"] = self.estado
        return data

    def with_status(self, estado: int) -> Ticket:
        """Copy of this ticket placed in another status."""
        data = copy.deepcopy(self.data)
        data["estado"] = estado
        return Ticket(id=self.id, estado=estado, data=data)

    @property
    def title(self) -> str:
        return self.data.get("titulo") or f"#{self.id}"

    @property
    def priority(self) -> int | None:
        return self.data.get("prioridad")


@dataclass(frozen=True)
class Status:
    """A status defined in the backend catalogue."""

    id: int
    label: str

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Status:
        try:
            return cls(id=int(raw["idEstado"]), label=str(raw["descripcionEstado"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"malformed status: {raw!r}") from e


@dataclass
class User:
    """The logged-in user acting on the board."""

    id: int
    name: str = ""
    surname: str = ""
    email: str = ""
    token: str = ""
    kind: int | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> User:
        try:
            return cls(
                id=int(raw["idUsuario"]),
                name=raw.get("Nombre", ""),
                surname=raw.get("Apellido1", ""),
                email=raw.get("Correo", ""),
                token=raw.get("Access_token", ""),
                kind=raw.get("Tipo_Usuario"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"malformed user: {raw!r}") from e

    @property
    def display_name(self) -> str:
        return f"{self.name} {self.surname}".strip() or self.email or f"#{self.id}"


@dataclass(frozen=True)
class ColumnMove:
    """A drop that puts a ticket into another column."""

    ticket: Ticket
    from_column: str
    to_column: str
    status_code: int


@dataclass(frozen=True)
class Reorder:
    """A drop that repositioned a ticket within its own column."""

    ticket: Ticket
    column: str
    old_index: int
    new_index: int
