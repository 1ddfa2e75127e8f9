"""Mensajes transitorios para el usuario."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Protocol

Kind = Literal["success", "error"]


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    kind: Kind = "success"


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


@dataclass
class RecordingNotifier:
    """Guarda las notificaciones emitidas, sin mostrarlas."""

    history: List[Notification] = field(default_factory=list)

    def notify(self, notification: Notification) -> None:
        self.history.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.history[-1] if self.history else None


__all__ = ["Kind", "Notification", "Notifier", "RecordingNotifier"]
