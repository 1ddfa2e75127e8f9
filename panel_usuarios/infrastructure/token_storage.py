"""Persistencia del token de sesión entre ejecuciones."""

from __future__ import annotations

from typing import Protocol

from PyQt6.QtCore import QSettings


class TokenStorage(Protocol):
    def read(self) -> str | None: ...

    def write(self, token: str) -> None: ...

    def clear(self) -> None: ...


class SettingsTokenStorage:
    """Guarda el token bajo una clave fija de ``QSettings``."""

    def __init__(self, organization: str, application: str, key: str = "token") -> None:
        self._settings = QSettings(organization, application)
        self._key = key

    def read(self) -> str | None:
        value = self._settings.value(self._key, None, type=str)
        return value or None

    def write(self, token: str) -> None:
        self._settings.setValue(self._key, token)
        self._settings.sync()

    def clear(self) -> None:
        self._settings.remove(self._key)
        self._settings.sync()


__all__ = ["SettingsTokenStorage", "TokenStorage"]
