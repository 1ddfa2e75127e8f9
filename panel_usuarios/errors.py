"""Errores de dominio del panel de usuarios."""

from __future__ import annotations

from typing import Sequence


class PanelError(Exception):
    """Base de todos los errores que la interfaz sabe mostrar."""


class NetworkFailure(PanelError):
    """Falla de una petición HTTP (conexión, timeout, estado o cuerpo inválido)."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class AuthenticationFailed(NetworkFailure):
    """El servicio rechazó las credenciales."""


class FetchCancelled(PanelError):
    """La agregación de páginas se canceló antes de terminar."""


class DuplicateUserError(PanelError):
    """Se intentó agregar un usuario cuyo id ya existe en la colección."""

    def __init__(self, user_id: object) -> None:
        super().__init__(f"Ya existe un usuario con id {user_id!r}.")
        self.user_id = user_id


class ValidationFailure(PanelError, ValueError):
    """Faltan campos obligatorios en el formulario de usuario."""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = tuple(fields)
        super().__init__("Completa todos los campos: " + ", ".join(self.fields))


__all__ = [
    "AuthenticationFailed",
    "DuplicateUserError",
    "FetchCancelled",
    "NetworkFailure",
    "PanelError",
    "ValidationFailure",
]
