"""Cliente HTTP del servicio de usuarios.

Encapsula las peticiones con ``urllib`` y traduce cualquier falla de red,
de estado HTTP o de formato a :class:`NetworkFailure`.
"""

from __future__ import annotations

import json
import logging
import socket
from typing import Any, Hashable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from panel_usuarios.config import AppConfig
from panel_usuarios.errors import AuthenticationFailed, NetworkFailure

logger = logging.getLogger(__name__)


class APIClient:
    """Provee acceso remoto al directorio de usuarios."""

    def __init__(self, config: AppConfig, token: str | None = None) -> None:
        self._config = config
        self.token = token

    # ------------------------------------------------------------------
    # Operaciones
    # ------------------------------------------------------------------
    def get_users_page(self, page: int) -> list[dict]:
        """Recupera una página de usuarios; una lista vacía indica el final."""

        payload = self._request("GET", f"{self._config.users_url}?page={page}")
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise NetworkFailure(f"Formato inesperado en la página {page}.")
        return data

    def delete_user(self, user_id: Hashable) -> None:
        """Elimina un usuario. El cuerpo de la respuesta no se consulta."""

        self._request("DELETE", f"{self._config.users_url}/{user_id}", parse=False)

    def login(self, email: str, password: str) -> str:
        """Envía las credenciales y devuelve el token emitido por el servicio."""

        try:
            payload = self._request(
                "POST",
                self._config.login_url,
                body={"email": email, "password": password},
                authenticated=False,
            )
        except NetworkFailure as exc:
            if exc.status in (400, 401):
                raise AuthenticationFailed("Correo o contraseña inválidos.", status=exc.status) from exc
            raise

        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise NetworkFailure("El servicio no devolvió un token.")
        return str(token)

    # ------------------------------------------------------------------
    # Transporte
    # ------------------------------------------------------------------
    def _headers(self, *, authenticated: bool, has_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if has_body:
            headers["Content-Type"] = "application/json"
        if self._config.api_key:
            headers["x-api-key"] = self._config.api_key
        if authenticated and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        url: str,
        *,
        body: dict | None = None,
        authenticated: bool = True,
        parse: bool = True,
    ) -> Any:
        data = json.dumps(body).encode("utf-8") if body is not None else None
        request = Request(
            url,
            data=data,
            method=method,
            headers=self._headers(authenticated=authenticated, has_body=data is not None),
        )
        logger.debug("%s %s", method, url)

        try:
            with urlopen(request, timeout=self._config.request_timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            logger.warning("%s %s -> HTTP %s", method, url, exc.code)
            raise NetworkFailure(f"Error HTTP {exc.code} en {method} {url}.", status=exc.code) from exc
        except URLError as exc:
            if isinstance(exc.reason, socket.timeout):
                message = f"La petición {method} {url} expiró por timeout."
            else:
                message = f"No se pudo conectar al servicio: {exc.reason}."
            logger.warning(message)
            raise NetworkFailure(message) from exc
        except (socket.timeout, TimeoutError) as exc:
            raise NetworkFailure(f"La petición {method} {url} expiró por timeout.") from exc

        if not parse:
            return None
        try:
            return json.loads(raw) if raw else {}
        except json.JSONDecodeError as exc:
            raise NetworkFailure(f"Respuesta inválida de {url}: no es JSON.") from exc


__all__ = ["APIClient"]
