"""Estado compartido de la aplicación.

:class:`StateStore` es la única autoridad sobre la colección de usuarios y el
estado de autenticación. Toda mutación pasa por sus operaciones con nombre y
se notifica a los suscriptores como un :class:`StoreChange`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Hashable, Iterable, List, Literal

from panel_usuarios.errors import DuplicateUserError
from panel_usuarios.models.user import AuthState, User

if TYPE_CHECKING:
    from panel_usuarios.infrastructure.token_storage import TokenStorage

logger = logging.getLogger(__name__)

Status = Literal["idle", "loading", "failed"]
ChangeOp = Literal["reset", "append", "replace", "remove"]


@dataclass(frozen=True, slots=True)
class StoreChange:
    """Mutación ya aplicada. ``index`` es la posición afectada (-1 en reset)."""

    op: ChangeOp
    index: int = -1
    user: User | None = None
    user_id: Hashable | None = None
    previous_size: int = 0


@dataclass(frozen=True, slots=True)
class StateSnapshot:
    users: tuple[User, ...]
    auth: AuthState
    status: Status = "idle"
    error: str | None = None


Listener = Callable[[StoreChange], None]


@dataclass
class StateStore:
    """Mantiene la colección sincronizada y la sesión actual."""

    storage: TokenStorage
    _users: List[User] = field(default_factory=list, init=False, repr=False)
    status: Status = "idle"
    error: str | None = None
    synced: bool = field(default=False, init=False)
    _auth: AuthState = field(default_factory=AuthState, init=False)
    _listeners: List[Listener] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._auth = AuthState(self.storage.read() or None)

    # ------------------------------------------------------------------
    # Sesión
    # ------------------------------------------------------------------
    @property
    def auth(self) -> AuthState:
        return self._auth

    @property
    def users(self) -> tuple[User, ...]:
        return tuple(self._users)

    def login(self, token: str) -> None:
        if not token:
            raise ValueError("El token de sesión no puede estar vacío.")
        self.storage.write(token)
        self._auth = AuthState(token)

    def logout(self) -> None:
        self.storage.clear()
        self._auth = AuthState()
        self._users = []
        self.synced = False
        self._emit(StoreChange("reset"))

    # ------------------------------------------------------------------
    # Colección
    # ------------------------------------------------------------------
    def replace_all(self, users: Iterable[User]) -> None:
        incoming = list(users)
        seen: set = set()
        for user in incoming:
            if user.id in seen:
                raise DuplicateUserError(user.id)
            seen.add(user.id)
        previous_size = len(self._users)
        self._users = incoming
        self.synced = True
        self.status = "idle"
        self.error = None
        self._emit(StoreChange("reset", previous_size=previous_size))

    def append(self, user: User) -> None:
        if self._index_of(user.id) != -1:
            raise DuplicateUserError(user.id)
        previous_size = len(self._users)
        self._users.append(user)
        self._emit(StoreChange("append", previous_size, user, user.id, previous_size))

    def replace(self, user: User) -> None:
        index = self._index_of(user.id)
        if index == -1:
            logger.debug("replace ignorado: id %r no existe", user.id)
            return
        self._users[index] = user
        self._emit(StoreChange("replace", index, user, user.id, len(self._users)))

    def remove(self, user_id: Hashable) -> None:
        index = self._index_of(user_id)
        if index == -1:
            logger.debug("remove ignorado: id %r no existe", user_id)
            return
        previous_size = len(self._users)
        user = self._users.pop(index)
        self._emit(StoreChange("remove", index, user, user_id, previous_size))

    def get(self, user_id: Hashable) -> User | None:
        index = self._index_of(user_id)
        return self._users[index] if index != -1 else None

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(tuple(self._users), self._auth, self.status, self.error)

    # ------------------------------------------------------------------
    # Estado transitorio de la carga
    # ------------------------------------------------------------------
    def mark_loading(self) -> None:
        self.status = "loading"
        self.error = None

    def mark_failed(self, message: str) -> None:
        self.status = "failed"
        self.error = message

    # ------------------------------------------------------------------
    # Suscriptores
    # ------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    def _index_of(self, user_id: Hashable) -> int:
        for index, user in enumerate(self._users):
            if user.id == user_id:
                return index
        return -1


__all__ = ["StateSnapshot", "StateStore", "StoreChange"]
