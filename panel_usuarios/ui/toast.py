"""Notificaciones transitorias en la barra de estado."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QStatusBar

from panel_usuarios.core.notifications import Notification

logger = logging.getLogger(__name__)

_STYLES = {
    "success": "background-color: #22c55e; color: #fff; font-weight: 600;",
    "error": "background-color: #ef4444; color: #fff; font-weight: 600;",
}


class ToastNotifier:
    """Muestra cada notificación y la retira sola tras ``duration_ms``."""

    def __init__(self, duration_ms: int = 3000) -> None:
        self.duration_ms = duration_ms
        self._status_bar: QStatusBar | None = None
        self._default_style = ""

    def attach(self, status_bar: QStatusBar) -> None:
        self._status_bar = status_bar
        self._default_style = status_bar.styleSheet()

    def notify(self, notification: Notification) -> None:
        log = logger.warning if notification.kind == "error" else logger.info
        log(notification.message)
        if self._status_bar is None:
            return
        self._status_bar.setStyleSheet(_STYLES[notification.kind])
        self._status_bar.showMessage(notification.message, self.duration_ms)
        QTimer.singleShot(self.duration_ms, self._restore_style)

    def _restore_style(self) -> None:
        if self._status_bar is not None and not self._status_bar.currentMessage():
            self._status_bar.setStyleSheet(self._default_style)


__all__ = ["ToastNotifier"]
