"""Diálogo de inicio de sesión por correo y contraseña."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from panel_usuarios.core.services import AuthService
from panel_usuarios.errors import AuthenticationFailed, NetworkFailure


class LoginDialog(QDialog):
    """Pantalla modal de login; al aceptar, la sesión ya quedó guardada."""

    def __init__(self, auth_service: AuthService, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Autenticación requerida")
        self.setModal(True)
        self._auth_service = auth_service

        self._lbl_status = QLabel("")
        self._lbl_status.setObjectName("statusLabel")
        self._lbl_status.setWordWrap(True)
        self._lbl_status.setVisible(False)

        self._input_email = QLineEdit()
        self._input_email.setPlaceholderText("abc@gmail.com")

        self._input_password = QLineEdit()
        self._input_password.setPlaceholderText("contraseña")
        self._input_password.setEchoMode(QLineEdit.EchoMode.Password)
        self._input_password.returnPressed.connect(self._on_submit)

        self._btn_login = QPushButton("Ingresar")
        self._btn_login.clicked.connect(self._on_submit)

        self._btn_cancel = QPushButton("Cancelar")
        self._btn_cancel.clicked.connect(self.reject)

        self._build_ui()
        self._input_email.setFocus()

    def _build_ui(self) -> None:
        title = QLabel("Bienvenido de nuevo")
        title.setStyleSheet("font-size: 15pt; font-weight: 700; color: #1d4ed8;")
        subtitle = QLabel("Ingresa tus credenciales para acceder a tu cuenta")
        subtitle.setStyleSheet("color: #6b7280; font-weight: 500;")

        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        form.addRow("Correo", self._input_email)
        form.addRow("Contraseña", self._input_password)

        buttons = QDialogButtonBox()
        buttons.addButton(self._btn_login, QDialogButtonBox.ButtonRole.AcceptRole)
        buttons.addButton(self._btn_cancel, QDialogButtonBox.ButtonRole.RejectRole)

        layout = QVBoxLayout()
        layout.setSpacing(16)
        layout.setContentsMargins(20, 18, 20, 16)
        layout.addWidget(title)
        layout.addWidget(subtitle)
        layout.addLayout(form)
        layout.addWidget(self._lbl_status)
        layout.addWidget(buttons)

        self.setLayout(layout)
        self.setMinimumWidth(420)
        self._apply_styles()

    def _on_submit(self) -> None:
        email = self._input_email.text().strip()
        password = self._input_password.text()

        if not email or not password:
            self._show_status("Correo y contraseña son obligatorios.")
            return

        self._btn_login.setEnabled(False)
        try:
            self._auth_service.login(email, password)
        except AuthenticationFailed:
            self._show_status("Correo o contraseña inválidos.")
            return
        except NetworkFailure as exc:
            self._show_status(str(exc))
            return
        finally:
            self._btn_login.setEnabled(True)

        self.accept()

    def _show_status(self, message: str) -> None:
        self._lbl_status.setText(message)
        self._lbl_status.setToolTip(message)
        self._lbl_status.setVisible(bool(message))

    def _apply_styles(self) -> None:
        self.setStyleSheet(
            """
            QDialog {
                background-color: #f3f4f6;
                color: #111827;
                font-family: 'Segoe UI', 'Open Sans', sans-serif;
                font-size: 9pt;
            }
            QLineEdit {
                border: 1px solid #d1d5db;
                border-radius: 8px;
                padding: 8px 10px;
                background: #fff;
            }
            QLineEdit:focus {
                border: 2px solid #3b82f6;
                outline: none;
            }
            QPushButton {
                background: #2563eb;
                color: #fff;
                border: none;
                border-radius: 10px;
                padding: 9px 16px;
                font-weight: 700;
            }
            QPushButton:hover {
                background: #1d4ed8;
            }
            QPushButton:disabled {
                background: #bfdbfe;
                color: #1e3a8a;
            }
            #statusLabel {
                color: #dc2626;
                font-weight: 600;
            }
            """
        )


__all__ = ["LoginDialog"]
