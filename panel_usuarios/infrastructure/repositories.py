"""Implementaciones de repositorios para acceso a datos."""

from __future__ import annotations

import logging
import threading
from typing import Hashable

from panel_usuarios.errors import FetchCancelled, NetworkFailure
from panel_usuarios.infrastructure.api_client import APIClient
from panel_usuarios.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Repositorio de usuarios basado en un cliente API."""

    def __init__(self, api_client: APIClient) -> None:
        self._api_client = api_client

    def fetch_all(self, cancel_token: threading.Event | None = None) -> list[User]:
        """Drena todas las páginas del endpoint en una sola lista ordenada.

        Las páginas se piden una tras otra empezando en 1 y el ciclo termina
        únicamente con una página vacía. Un id repetido entre páginas se trata
        como respuesta inválida. Cualquier error aborta la agregación
        y el acumulador parcial se descarta; confirmar el resultado en el
        estado es responsabilidad del llamador.
        """

        accumulated: list[User] = []
        seen_ids: set = set()
        page = 1
        while True:
            items = self._api_client.get_users_page(page)
            if cancel_token is not None and cancel_token.is_set():
                logger.info("Carga de usuarios cancelada en la página %s", page)
                raise FetchCancelled(f"Carga cancelada en la página {page}.")
            if not items:
                break
            try:
                users = [User.from_payload(item) for item in items]
            except (KeyError, TypeError, AttributeError) as exc:
                raise NetworkFailure(f"Usuario mal formado en la página {page}.") from exc
            for user in users:
                if user.id in seen_ids:
                    raise NetworkFailure(f"Id de usuario repetido {user.id!r} en la página {page}.")
                seen_ids.add(user.id)
            accumulated.extend(users)
            logger.debug("Página %s: %s usuarios", page, len(items))
            page += 1

        logger.info("Usuarios cargados: %s en %s páginas", len(accumulated), page - 1)
        return accumulated

    def delete(self, user_id: Hashable) -> None:
        self._api_client.delete_user(user_id)


__all__ = ["UserRepository"]
