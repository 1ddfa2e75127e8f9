from __future__ import annotations

from typing import Hashable

import pytest

from panel_usuarios.core.lazy_window import LazyRenderWindow
from panel_usuarios.core.notifications import RecordingNotifier
from panel_usuarios.core.services import UserService
from panel_usuarios.core.state import StateStore
from panel_usuarios.errors import NetworkFailure
from panel_usuarios.infrastructure.repositories import UserRepository
from panel_usuarios.models.user import User


class MemoryTokenStorage:
    def __init__(self, token: str | None = None) -> None:
        self.token = token

    def read(self) -> str | None:
        return self.token

    def write(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None


class FakeUsersClient:
    """Sirve páginas predefinidas y registra cada llamada."""

    def __init__(self, pages: list[list[dict]] | None = None, fail_on_page: int | None = None) -> None:
        self.pages = pages or [[]]
        self.fail_on_page = fail_on_page
        self.fail_delete = False
        self.page_calls: list[int] = []
        self.deleted: list[Hashable] = []

    @property
    def calls(self) -> int:
        return len(self.page_calls) + len(self.deleted)

    def get_users_page(self, page: int) -> list[dict]:
        self.page_calls.append(page)
        if page == self.fail_on_page:
            raise NetworkFailure(f"Error HTTP 500 en la página {page}.", status=500)
        if page - 1 < len(self.pages):
            return self.pages[page - 1]
        return []

    def delete_user(self, user_id: Hashable) -> None:
        if self.fail_delete:
            raise NetworkFailure("Error HTTP 503.", status=503)
        self.deleted.append(user_id)


def payload(user_id: int, first_name: str = "", last_name: str = "") -> dict:
    return {
        "id": user_id,
        "first_name": first_name or f"Nombre{user_id}",
        "last_name": last_name or f"Apellido{user_id}",
        "email": f"user{user_id}@reqres.in",
        "avatar": f"https://reqres.in/img/faces/{user_id}-image.jpg",
    }


def make_user(user_id: int, first_name: str = "", last_name: str = "") -> User:
    return User.from_payload(payload(user_id, first_name, last_name))


@pytest.fixture
def storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture
def store(storage: MemoryTokenStorage) -> StateStore:
    return StateStore(storage)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client() -> FakeUsersClient:
    return FakeUsersClient(
        [
            [payload(1, "George", "Bluth"), payload(2, "Janet", "Weaver")],
            [payload(3, "Emma", "Wong")],
            [],
        ]
    )


@pytest.fixture
def service(client: FakeUsersClient, store: StateStore, notifier: RecordingNotifier) -> UserService:
    ids = iter(range(1000, 2000))
    return UserService(
        UserRepository(client),  # type: ignore[arg-type]
        store,
        LazyRenderWindow(chunk_size=6),
        notifier,
        id_factory=lambda: next(ids),
    )
