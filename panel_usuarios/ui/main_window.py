"""Ventana principal de la aplicación."""

from __future__ import annotations

import logging
import threading

from PyQt6.QtCore import QObject, Qt, QThread, QTimer, pyqtSignal
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from panel_usuarios.core.services import AuthService, UserService
from panel_usuarios.errors import DuplicateUserError, FetchCancelled, NetworkFailure
from panel_usuarios.models.user import User
from panel_usuarios.ui.toast import ToastNotifier
from panel_usuarios.ui.user_dialog import UserFormDialog

logger = logging.getLogger(__name__)


class _FetchWorker(QObject):
    finished = pyqtSignal(list)
    error = pyqtSignal(str)
    cancelled = pyqtSignal()

    def __init__(self, user_service: UserService, cancel_token: threading.Event) -> None:
        super().__init__()
        self.user_service = user_service
        self.cancel_token = cancel_token

    def run(self) -> None:
        try:
            usuarios = self.user_service.fetch_users(self.cancel_token)
        except FetchCancelled:
            self.cancelled.emit()
            return
        except NetworkFailure as exc:
            self.error.emit(str(exc))
            return
        self.finished.emit(usuarios)


class MainWindow(QMainWindow):
    """Directorio de usuarios con carga perezosa al desplazarse."""

    def __init__(
        self,
        *,
        user_service: UserService,
        auth_service: AuthService,
        notifier: ToastNotifier,
    ) -> None:
        super().__init__()
        self.user_service = user_service
        self.auth_service = auth_service
        self.logged_out = False
        self._cancel_token = threading.Event()
        self._fetch_thread: QThread | None = None
        self._fetch_worker: _FetchWorker | None = None

        self.setWindowTitle("Panel de gestión de usuarios")
        self.resize(720, 520)
        notifier.attach(self.statusBar())

        self.search_box = QLineEdit(placeholderText="Buscar usuarios por nombre")
        self.search_box.textChanged.connect(self._on_search_changed)

        self.add_button = QPushButton("Añadir usuario")
        self.add_button.clicked.connect(self._on_add)

        self.refresh_button = QPushButton("Reintentar carga")
        self.refresh_button.clicked.connect(self._reload_data)

        self.logout_button = QPushButton("Cerrar sesión")
        self.logout_button.clicked.connect(self._on_logout)

        self.edit_button = QPushButton("Editar")
        self.edit_button.clicked.connect(self._on_edit)

        self.delete_button = QPushButton("Eliminar")
        self.delete_button.clicked.connect(self._on_delete)

        self.user_list = QListWidget()
        self.user_list.setSelectionMode(QListWidget.SelectionMode.SingleSelection)
        self.user_list.itemDoubleClicked.connect(lambda _item: self._on_edit())
        self.user_list.itemSelectionChanged.connect(self._update_actions)
        self.user_list.verticalScrollBar().valueChanged.connect(self._check_last_visible)

        self.empty_label = QLabel("No se encontraron usuarios. Prueba otra búsqueda o agrega uno nuevo.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setStyleSheet("color: #6b7280;")
        self.empty_label.setVisible(False)

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Usuarios"))
        top_bar.addStretch(1)
        top_bar.addWidget(self.add_button)
        top_bar.addWidget(self.refresh_button)
        top_bar.addWidget(self.logout_button)

        actions = QHBoxLayout()
        actions.addStretch(1)
        actions.addWidget(self.edit_button)
        actions.addWidget(self.delete_button)

        layout = QVBoxLayout()
        layout.addLayout(top_bar)
        layout.addWidget(self.search_box)
        layout.addWidget(self.user_list)
        layout.addWidget(self.empty_label)
        layout.addLayout(actions)

        container = QWidget()
        container.setLayout(layout)
        self.setCentralWidget(container)

        self._update_actions()
        self._reload_data()

    # ------------------------------------------------------------------
    # Carga
    # ------------------------------------------------------------------
    def _reload_data(self) -> None:
        """Descarga todas las páginas en un hilo y confirma el resultado aquí."""

        if self._fetch_thread is not None or self.user_service.synced:
            return
        self.user_service.begin_sync()
        self.refresh_button.setVisible(False)
        self.statusBar().showMessage("Cargando usuarios...", 0)

        self._fetch_thread = QThread(self)
        self._fetch_worker = _FetchWorker(self.user_service, self._cancel_token)
        self._fetch_worker.moveToThread(self._fetch_thread)

        self._fetch_thread.started.connect(self._fetch_worker.run)
        self._fetch_worker.finished.connect(self._fetch_thread.quit)
        self._fetch_worker.error.connect(self._fetch_thread.quit)
        self._fetch_worker.cancelled.connect(self._fetch_thread.quit)
        self._fetch_worker.finished.connect(self._on_fetch_completed)
        self._fetch_worker.error.connect(self._on_fetch_failed)
        self._fetch_worker.cancelled.connect(self.user_service.cancel_sync)
        self._fetch_thread.finished.connect(self._clear_fetch_thread)

        self._fetch_thread.start()

    def _on_search_changed(self, _text: str) -> None:
        self._render()

    def _on_fetch_completed(self, usuarios: list) -> None:
        if self.user_service.commit_sync(usuarios, self._cancel_token):
            self._render()

    def _on_fetch_failed(self, message: str) -> None:
        logger.warning("Carga de usuarios fallida: %s", message)
        self.user_service.fail_sync(message, self._cancel_token)
        self._render()

    def _clear_fetch_thread(self) -> None:
        if self._fetch_worker is not None:
            self._fetch_worker.deleteLater()
        if self._fetch_thread is not None:
            self._fetch_thread.deleteLater()
        self._fetch_worker = None
        self._fetch_thread = None
        self.refresh_button.setVisible(not self.user_service.synced)

    # ------------------------------------------------------------------
    # Renderizado
    # ------------------------------------------------------------------
    def _render(self) -> None:
        window = self.user_service.window
        usuarios = self.user_service.visible_users(self.search_box.text())

        self.user_list.clear()
        for usuario in usuarios:
            item = QListWidgetItem(f"{usuario.full_name}  ·  {usuario.email}")
            item.setData(Qt.ItemDataRole.UserRole, usuario.id)
            item.setToolTip(usuario.avatar)
            self.user_list.addItem(item)

        window.track(usuarios[-1].id if usuarios else None)
        self.empty_label.setVisible(not window.loading and not usuarios)
        self._update_actions()
        # Si el último elemento ya cabe en pantalla, se amplía sin esperar al scroll.
        QTimer.singleShot(0, self._check_last_visible)

    def _check_last_visible(self, *_args) -> None:
        count = self.user_list.count()
        if not count:
            return
        last = self.user_list.item(count - 1)
        rect = self.user_list.visualItemRect(last)
        if not rect.intersects(self.user_list.viewport().rect()):
            return
        if self.user_service.window.on_visible(last.data(Qt.ItemDataRole.UserRole)):
            self._render()

    def _update_actions(self) -> None:
        selected = self._selected_user() is not None
        self.edit_button.setEnabled(selected)
        self.delete_button.setEnabled(selected)

    def _selected_user(self) -> User | None:
        items = self.user_list.selectedItems()
        if not items:
            return None
        return self.user_service.get_user(items[0].data(Qt.ItemDataRole.UserRole))

    # ------------------------------------------------------------------
    # Acciones
    # ------------------------------------------------------------------
    def _on_add(self) -> None:
        self._open_form(None)

    def _on_edit(self) -> None:
        usuario = self._selected_user()
        if usuario is not None:
            self._open_form(usuario)

    def _open_form(self, usuario: User | None) -> None:
        dialog = UserFormDialog(usuario, parent=self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        try:
            guardado = self.user_service.save_user(dialog.form_data, existing=usuario)
        except DuplicateUserError as exc:
            QMessageBox.warning(self, "Usuario", str(exc))
            self._render()
            return
        self._render()
        self._scroll_to(guardado)

    def _scroll_to(self, usuario: User) -> None:
        for row in range(self.user_list.count()):
            item = self.user_list.item(row)
            if item.data(Qt.ItemDataRole.UserRole) == usuario.id:
                self.user_list.setCurrentItem(item)
                self.user_list.scrollToItem(item)
                return

    def _on_delete(self) -> None:
        items = self.user_list.selectedItems()
        if not items:
            return
        request = self.user_service.request_delete(items[0].data(Qt.ItemDataRole.UserRole))
        if request is None:
            return
        answer = QMessageBox.question(
            self,
            "Eliminar usuario",
            f"¿Seguro que deseas eliminar a {request.user.full_name}?",
        )
        if answer != QMessageBox.StandardButton.Yes:
            self.user_service.cancel_delete(request)
            return
        self.user_service.confirm_delete(request)
        self._render()

    def _on_logout(self) -> None:
        self.auth_service.logout()
        self.logged_out = True
        self.close()

    def closeEvent(self, event) -> None:  # noqa: N802 - API de Qt
        self._cancel_token.set()
        if self._fetch_thread is not None:
            self._fetch_worker.finished.disconnect(self._on_fetch_completed)
            self._fetch_worker.error.disconnect(self._on_fetch_failed)
            self._fetch_thread.quit()
            self._fetch_thread.wait()
        super().closeEvent(event)


__all__ = ["MainWindow"]
