"""Filtro de búsqueda sobre la ventana visible."""

from __future__ import annotations

from typing import Iterable

from panel_usuarios.models.user import User


def matches(user: User, query: str) -> bool:
    return query.lower() in user.full_name.lower()


def filter_users(users: Iterable[User], query: str) -> list[User]:
    """Usuarios cuyo nombre completo contiene ``query``, en el mismo orden."""

    if not query:
        return list(users)
    return [user for user in users if matches(user, query)]


__all__ = ["filter_users", "matches"]
