"""Ventana de renderizado perezoso sobre la colección de usuarios.

La ventana es un cursor: solo guarda cuántos elementos del principio de la
colección están materializados. Lo visible es siempre ``coleccion[:tamaño]``,
así que las mutaciones de la colección solo tienen que corregir el tamaño.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Callable, Hashable, Sequence

from panel_usuarios.models.user import User

if TYPE_CHECKING:
    from panel_usuarios.core.state import StateStore, StoreChange

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 6

_UNTRACKED = object()


class WindowState(enum.Enum):
    EMPTY = "empty"
    SEEDED = "seeded"
    GROWING = "growing"
    EXHAUSTED = "exhausted"


class LazyRenderWindow:
    """Prefijo creciente de la colección, ampliado por bloques fijos.

    La ampliación la dispara la visibilidad del último elemento renderizado.
    Cada render debe llamar a :meth:`track` con su último elemento; eso
    desconecta al observador anterior, de modo que un aviso tardío de un
    elemento viejo nunca amplía la ventana dos veces. Mientras ``loading``
    esté activo (hay una carga en curso) los avisos se ignoran.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        source: Callable[[], Sequence[User]] | None = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size debe ser mayor que cero")
        self.chunk_size = chunk_size
        self.loading = False
        self._source = source
        self._size = 0
        self._seeded = False
        self._extended = False
        self._tracked: object = _UNTRACKED
        self._unsubscribe: Callable[[], None] | None = None

    # ------------------------------------------------------------------
    # Fuente de datos
    # ------------------------------------------------------------------
    def bind(self, store: "StateStore") -> None:
        """Lee la colección de ``store`` y aplica sus cambios automáticamente."""

        self.unbind()
        self._source = lambda: store.users
        self._unsubscribe = store.subscribe(self.patch)

    def unbind(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def collection(self) -> Sequence[User]:
        return self._source() if self._source is not None else ()

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self._size

    @property
    def state(self) -> WindowState:
        if not self._seeded:
            return WindowState.EMPTY
        if self._size >= len(self.collection):
            return WindowState.EXHAUSTED
        return WindowState.GROWING if self._extended else WindowState.SEEDED

    @property
    def exhausted(self) -> bool:
        return self.state is WindowState.EXHAUSTED

    def visible(self) -> list[User]:
        return list(self.collection[: self._size])

    # ------------------------------------------------------------------
    # Crecimiento
    # ------------------------------------------------------------------
    def seed(self, collection: Sequence[User] | None = None) -> None:
        """Materializa el primer bloque de ``collection`` o de la fuente enlazada.

        Una ventana enlazada con :meth:`bind` siempre lee del estado, así que
        pasarle otra colección es un error.
        """

        if collection is not None:
            if self._unsubscribe is not None:
                raise ValueError("La ventana está enlazada al estado; seed() no acepta otra colección.")
            self._source = lambda: collection
        items = self.collection
        self._size = min(self.chunk_size, len(items))
        self._seeded = True
        self._extended = False
        self._tracked = _UNTRACKED
        logger.debug("Ventana sembrada con %s de %s usuarios", self._size, len(items))

    def extend(self) -> int:
        """Agrega el siguiente bloque; devuelve cuántos elementos se sumaron."""

        if not self._seeded or self.loading:
            return 0
        remaining = len(self.collection) - self._size
        step = min(self.chunk_size, max(remaining, 0))
        if step:
            self._size += step
            self._extended = True
            logger.debug("Ventana ampliada a %s usuarios", self._size)
        return step

    def reveal(self, user_id: Hashable) -> bool:
        """Amplía por bloques hasta que ``user_id`` quede dentro de la ventana."""

        while not any(user.id == user_id for user in self.visible()):
            if self.extend() == 0:
                return False
        return True

    def track(self, element: Hashable | None) -> None:
        """Observa ``element`` como último renderizado y descarta el anterior."""

        self._tracked = _UNTRACKED if element is None else element

    def on_visible(self, element: Hashable) -> bool:
        """Aviso de que ``element`` entró en pantalla. Devuelve si hubo ampliación."""

        if self.loading or not self._seeded:
            return False
        if self._tracked is _UNTRACKED or element != self._tracked:
            return False
        if self.exhausted:
            return False
        # El observador se consume: el próximo render vuelve a llamar a track().
        self._tracked = _UNTRACKED
        return self.extend() > 0

    # ------------------------------------------------------------------
    # Cambios de la colección
    # ------------------------------------------------------------------
    def patch(self, change: "StoreChange") -> None:
        """Ajusta el cursor a una mutación ya aplicada en la colección."""

        if change.op == "reset":
            self.seed()
        elif change.op == "append":
            if self._seeded and self._size >= change.previous_size:
                self._size = change.previous_size + 1
        elif change.op == "remove":
            if 0 <= change.index < self._size:
                self._size -= 1
        self._size = min(self._size, len(self.collection))


__all__ = ["DEFAULT_CHUNK_SIZE", "LazyRenderWindow", "WindowState"]
