"""Definiciones de modelos de dominio."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Hashable, Mapping

from panel_usuarios.errors import ValidationFailure

REQUIRED_FIELDS = ("first_name", "last_name", "email")
FORM_FIELDS = REQUIRED_FIELDS + ("avatar",)


@dataclass(frozen=True, slots=True)
class User:
    """Registro del directorio de usuarios. La identidad es ``id``."""

    id: Hashable
    first_name: str
    last_name: str
    email: str
    avatar: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "User":
        """Construye un usuario desde un elemento ``data`` del API."""

        return cls(
            id=data["id"],
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            email=str(data.get("email") or ""),
            avatar=str(data.get("avatar") or ""),
        )

    def merged(self, changes: Mapping[str, str]) -> "User":
        """Devuelve una copia con los campos del formulario aplicados."""

        return replace(self, **{key: changes[key] for key in FORM_FIELDS if key in changes})


@dataclass(frozen=True, slots=True)
class AuthState:
    """Estado de autenticación; ``is_authenticated`` se deriva del token."""

    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None


def validate_user_form(data: Mapping[str, Any]) -> dict[str, str]:
    """Normaliza el formulario de alta/edición.

    ``first_name``, ``last_name`` y ``email`` son obligatorios; ``avatar`` es
    opcional. Lanza :class:`ValidationFailure` con los campos faltantes.
    """

    cleaned = {key: str(data.get(key) or "").strip() for key in FORM_FIELDS}
    missing = [key for key in REQUIRED_FIELDS if not cleaned[key]]
    if missing:
        raise ValidationFailure(missing)
    return cleaned


__all__ = ["AuthState", "FORM_FIELDS", "REQUIRED_FIELDS", "User", "validate_user_form"]
