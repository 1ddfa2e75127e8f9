"""Configuración de la aplicación.

Los valores por defecto apuntan al servicio público de demostración. Cada
campo puede sobrescribirse con una variable de entorno ``PANEL_USUARIOS_*``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping

CONFIG_ENV_OVERRIDES = {
    "api_base": "PANEL_USUARIOS_API_BASE",
    "users_path": "PANEL_USUARIOS_USERS_PATH",
    "login_path": "PANEL_USUARIOS_LOGIN_PATH",
    "api_key": "PANEL_USUARIOS_API_KEY",
    "chunk_size": "PANEL_USUARIOS_CHUNK_SIZE",
    "request_timeout": "PANEL_USUARIOS_REQUEST_TIMEOUT",
    "notification_ms": "PANEL_USUARIOS_NOTIFICATION_MS",
    "settings_org": "PANEL_USUARIOS_SETTINGS_ORG",
    "settings_app": "PANEL_USUARIOS_SETTINGS_APP",
}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Parámetros de conexión, ventana perezosa y persistencia de sesión."""

    api_base: str = "https://reqres.in/api"
    users_path: str = "/users"
    login_path: str = "/login"
    api_key: str | None = None
    chunk_size: int = 6
    request_timeout: float = 10.0
    notification_ms: int = 3000
    settings_org: str = "Intysoft"
    settings_app: str = "PanelUsuarios"
    token_key: str = "token"

    @property
    def users_url(self) -> str:
        return f"{self.api_base.rstrip('/')}{self.users_path}"

    @property
    def login_url(self) -> str:
        return f"{self.api_base.rstrip('/')}{self.login_path}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Construye la configuración aplicando las variables de entorno."""

        env = os.environ if environ is None else environ
        config = cls()
        types = {field.name: field.type for field in fields(cls)}
        overrides: dict[str, object] = {}
        for key, env_var in CONFIG_ENV_OVERRIDES.items():
            value = env.get(env_var)
            if value is None:
                continue
            kind = types[key]
            try:
                if kind == "int":
                    overrides[key] = int(value)
                elif kind == "float":
                    overrides[key] = float(value)
                else:
                    overrides[key] = value
            except ValueError as exc:
                raise ValueError(f"{env_var} inválido: {value!r}") from exc
        if overrides.get("chunk_size", config.chunk_size) <= 0:  # type: ignore[operator]
            raise ValueError("chunk_size debe ser mayor que cero")
        return replace(config, **overrides)


__all__ = ["AppConfig", "CONFIG_ENV_OVERRIDES"]
