"""Servicios de aplicación que coordinan el acceso a datos."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Hashable, Mapping

from panel_usuarios.core.lazy_window import LazyRenderWindow
from panel_usuarios.core.notifications import Notification, Notifier
from panel_usuarios.core.search import filter_users
from panel_usuarios.core.state import StateStore
from panel_usuarios.errors import DuplicateUserError, FetchCancelled, NetworkFailure
from panel_usuarios.infrastructure.api_client import APIClient
from panel_usuarios.infrastructure.repositories import UserRepository
from panel_usuarios.models.user import User, validate_user_form

logger = logging.getLogger(__name__)


def time_based_id() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class DeleteRequest:
    """Borrado pendiente de confirmación."""

    user_id: Hashable
    user: User


class UserService:
    """Orquesta la sincronización y las mutaciones del directorio."""

    def __init__(
        self,
        repository: UserRepository,
        store: StateStore,
        window: LazyRenderWindow,
        notifier: Notifier,
        id_factory: Callable[[], int] = time_based_id,
    ) -> None:
        self._repository = repository
        self._store = store
        self._window = window
        self._notifier = notifier
        self._id_factory = id_factory
        window.bind(store)

    @property
    def window(self) -> LazyRenderWindow:
        return self._window

    # ------------------------------------------------------------------
    # Sincronización
    # ------------------------------------------------------------------
    @property
    def synced(self) -> bool:
        return self._store.synced

    def begin_sync(self) -> None:
        self._store.mark_loading()
        self._window.loading = True

    def fetch_users(self, cancel_token: threading.Event | None = None) -> list[User]:
        """Agrega todas las páginas sin tocar el estado; apto para un hilo de trabajo."""

        return self._repository.fetch_all(cancel_token)

    def commit_sync(self, users: list[User], cancel_token: threading.Event | None = None) -> bool:
        """Confirma la carga en el estado, salvo que se haya cancelado antes."""

        if cancel_token is not None and cancel_token.is_set():
            self.cancel_sync()
            return False
        self._window.loading = False
        self._store.replace_all(users)
        self._notifier.notify(Notification(f"{len(users)} usuarios cargados."))
        return True

    def fail_sync(self, message: str, cancel_token: threading.Event | None = None) -> None:
        if cancel_token is not None and cancel_token.is_set():
            self.cancel_sync()
            return
        self._window.loading = False
        self._store.mark_failed(message)
        self._notifier.notify(
            Notification("No se pudieron cargar los usuarios. Intenta de nuevo.", "error")
        )

    def cancel_sync(self) -> None:
        self._window.loading = False
        self._store.status = "idle"

    def sync_users(self, cancel_token: threading.Event | None = None) -> bool:
        """Carga todo el directorio y lo confirma de una vez.

        Si cualquier página falla la colección queda exactamente como estaba.
        La colección se carga una sola vez por sesión; después solo cambia
        por altas, ediciones y borrados locales.
        """

        if self._store.synced:
            logger.debug("La colección ya está sincronizada; no se vuelve a cargar.")
            return False
        self.begin_sync()
        try:
            users = self.fetch_users(cancel_token)
        except FetchCancelled:
            self.cancel_sync()
            return False
        except NetworkFailure as exc:
            logger.warning("Fallo al cargar usuarios: %s", exc)
            self.fail_sync(str(exc))
            return False
        return self.commit_sync(users, cancel_token)

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def visible_users(self, query: str = "") -> list[User]:
        return filter_users(self._window.visible(), query)

    def get_user(self, user_id: Hashable) -> User | None:
        return self._store.get(user_id)

    # ------------------------------------------------------------------
    # Alta y edición
    # ------------------------------------------------------------------
    def save_user(self, form: Mapping[str, str], existing: User | None = None) -> User:
        """Valida el formulario y crea o actualiza el usuario.

        Lanza ``ValidationFailure`` sin mutar nada si faltan campos.
        """

        cleaned = validate_user_form(form)
        if existing is not None:
            updated = existing.merged(cleaned)
            self._store.replace(updated)
            self._notifier.notify(Notification("Usuario actualizado correctamente."))
            return updated

        user = User(id=self._next_id(), **cleaned)
        try:
            self._store.append(user)
        except DuplicateUserError:
            self._notifier.notify(Notification("No se pudo agregar el usuario: id repetido.", "error"))
            raise
        self._window.reveal(user.id)
        self._notifier.notify(Notification("Usuario agregado correctamente."))
        return user

    def _next_id(self) -> int:
        candidate = self._id_factory()
        while self._store.get(candidate) is not None:
            candidate += 1
        return candidate

    # ------------------------------------------------------------------
    # Borrado en dos pasos
    # ------------------------------------------------------------------
    def request_delete(self, user_id: Hashable) -> DeleteRequest | None:
        user = self._store.get(user_id)
        if user is None:
            return None
        return DeleteRequest(user_id, user)

    def cancel_delete(self, request: DeleteRequest) -> None:
        logger.debug("Borrado cancelado para %r", request.user_id)

    def confirm_delete(self, request: DeleteRequest) -> bool:
        """Borra en el servidor y, solo si tuvo éxito, en la colección local."""

        try:
            self._repository.delete(request.user_id)
        except NetworkFailure as exc:
            logger.warning("Fallo al eliminar %r: %s", request.user_id, exc)
            self._notifier.notify(Notification("No se pudo eliminar el usuario. Intenta de nuevo.", "error"))
            return False
        self._store.remove(request.user_id)
        self._notifier.notify(Notification("Usuario eliminado correctamente."))
        return True


class AuthService:
    """Inicio y cierre de sesión contra el servicio remoto."""

    def __init__(self, api_client: APIClient, store: StateStore) -> None:
        self._api_client = api_client
        self._store = store
        self._api_client.token = store.auth.token

    @property
    def is_authenticated(self) -> bool:
        return self._store.auth.is_authenticated

    def login(self, email: str, password: str) -> str:
        token = self._api_client.login(email.strip(), password)
        self._store.login(token)
        self._api_client.token = token
        return token

    def logout(self) -> None:
        self._store.logout()
        self._api_client.token = None


__all__ = ["AuthService", "DeleteRequest", "UserService", "time_based_id"]
