"""Punto de entrada de la aplicación.

Crea los componentes de infraestructura, servicios y estado, pide
credenciales si no hay sesión guardada y arranca la interfaz principal.
"""

from __future__ import annotations

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication, QDialog

from panel_usuarios.config import AppConfig
from panel_usuarios.core.lazy_window import LazyRenderWindow
from panel_usuarios.core.services import AuthService, UserService
from panel_usuarios.core.state import StateStore
from panel_usuarios.infrastructure.api_client import APIClient
from panel_usuarios.infrastructure.repositories import UserRepository
from panel_usuarios.infrastructure.token_storage import SettingsTokenStorage
from panel_usuarios.ui.login_dialog import LoginDialog
from panel_usuarios.ui.main_window import MainWindow
from panel_usuarios.ui.toast import ToastNotifier


def configure_logging() -> None:
    level = os.getenv("PANEL_USUARIOS_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Arranca la aplicación PyQt6 con las dependencias configuradas."""

    configure_logging()
    config = AppConfig.from_env()

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    storage = SettingsTokenStorage(config.settings_org, config.settings_app, config.token_key)
    state = StateStore(storage)
    api_client = APIClient(config)
    repository = UserRepository(api_client)
    notifier = ToastNotifier(config.notification_ms)
    window = LazyRenderWindow(config.chunk_size)
    user_service = UserService(repository, state, window, notifier)
    auth_service = AuthService(api_client, state)

    exit_code = 0
    while True:
        if not auth_service.is_authenticated:
            login = LoginDialog(auth_service)
            if login.exec() != QDialog.DialogCode.Accepted:
                break

        main_window = MainWindow(
            user_service=user_service,
            auth_service=auth_service,
            notifier=notifier,
        )
        main_window.show()
        exit_code = app.exec()
        if not main_window.logged_out:
            break

    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover - punto de entrada interactivo
    main()
