"""Formulario modal de alta y edición de usuarios."""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QVBoxLayout,
)

from panel_usuarios.errors import ValidationFailure
from panel_usuarios.models.user import User, validate_user_form


class UserFormDialog(QDialog):
    """Recoge ``first_name``, ``last_name``, ``email`` y ``avatar``.

    Solo se acepta cuando el formulario valida; ``form_data`` queda con los
    valores normalizados.
    """

    def __init__(self, user: User | None = None, parent=None) -> None:
        super().__init__(parent)
        self.user = user
        self.form_data: dict[str, str] = {}
        self.setWindowTitle("Editar usuario" if user else "Nuevo usuario")
        self.setModal(True)

        self._inputs = {
            "first_name": QLineEdit(user.first_name if user else ""),
            "last_name": QLineEdit(user.last_name if user else ""),
            "email": QLineEdit(user.email if user else ""),
            "avatar": QLineEdit(user.avatar if user else ""),
        }
        self._inputs["avatar"].setPlaceholderText("https://...")

        self._lbl_error = QLabel("")
        self._lbl_error.setStyleSheet("color: #dc2626; font-weight: 600;")
        self._lbl_error.setVisible(False)

        form = QFormLayout()
        form.addRow("Nombre", self._inputs["first_name"])
        form.addRow("Apellido", self._inputs["last_name"])
        form.addRow("Correo", self._inputs["email"])
        form.addRow("Avatar (URL)", self._inputs["avatar"])

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.button(QDialogButtonBox.StandardButton.Save).setText(
            "Guardar cambios" if user else "Agregar usuario"
        )
        buttons.accepted.connect(self._on_submit)
        buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addLayout(form)
        layout.addWidget(self._lbl_error)
        layout.addWidget(buttons)
        self.setLayout(layout)
        self.setMinimumWidth(380)

    def _on_submit(self) -> None:
        raw = {key: widget.text() for key, widget in self._inputs.items()}
        try:
            self.form_data = validate_user_form(raw)
        except ValidationFailure as exc:
            self._lbl_error.setText(str(exc))
            self._lbl_error.setVisible(True)
            self._inputs[exc.fields[0]].setFocus()
            return
        self.accept()


__all__ = ["UserFormDialog"]
