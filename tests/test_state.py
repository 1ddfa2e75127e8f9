from __future__ import annotations

import pytest

from panel_usuarios.core.state import StateStore
from panel_usuarios.errors import DuplicateUserError

from conftest import MemoryTokenStorage, make_user


@pytest.fixture
def filled(store):
    store.replace_all([make_user(1), make_user(2), make_user(3)])
    return store


def ids(store):
    return [u.id for u in store.snapshot().users]


def test_initial_auth_is_read_from_storage():
    assert StateStore(MemoryTokenStorage("abc")).auth.is_authenticated
    assert not StateStore(MemoryTokenStorage()).auth.is_authenticated


def test_login_and_logout_persist_token(store, storage):
    store.login("QpwL5tke4Pnpja7X4")
    assert store.auth.token == "QpwL5tke4Pnpja7X4"
    assert store.auth.is_authenticated
    assert storage.token == "QpwL5tke4Pnpja7X4"

    store.logout()
    assert store.auth.token is None
    assert not store.auth.is_authenticated
    assert storage.token is None


def test_logout_discards_collection(filled):
    filled.logout()

    assert ids(filled) == []


def test_replace_all_keeps_order_and_resets_status(store):
    store.mark_failed("boom")

    store.replace_all([make_user(3), make_user(1)])

    snapshot = store.snapshot()
    assert [u.id for u in snapshot.users] == [3, 1]
    assert snapshot.status == "idle"
    assert snapshot.error is None


def test_append_then_remove_restores_collection(filled):
    before = filled.snapshot().users

    filled.append(make_user(99))
    assert ids(filled) == [1, 2, 3, 99]

    filled.remove(99)
    assert filled.snapshot().users == before


def test_append_duplicate_id_is_rejected(filled):
    with pytest.raises(DuplicateUserError):
        filled.append(make_user(2, "Otra", "Persona"))

    assert ids(filled) == [1, 2, 3]
    assert filled.get(2).first_name == "Nombre2"


def test_replace_keeps_position_and_length(filled):
    filled.replace(make_user(2, "Janet", "Weaver"))

    users = filled.snapshot().users
    assert [u.id for u in users] == [1, 2, 3]
    assert users[1].full_name == "Janet Weaver"
    assert users[0] == make_user(1)


def test_replace_and_remove_of_unknown_id_are_silent(filled):
    events = []
    filled.subscribe(events.append)

    filled.replace(make_user(42))
    filled.remove(42)

    assert ids(filled) == [1, 2, 3]
    assert events == []


def test_mutations_emit_one_change_each(filled):
    events = []
    unsubscribe = filled.subscribe(events.append)

    filled.append(make_user(4))
    filled.replace(make_user(1, "Ana", "Gómez"))
    filled.remove(2)
    unsubscribe()
    filled.remove(3)

    assert [(e.op, e.index, e.user_id) for e in events] == [
        ("append", 3, 4),
        ("replace", 0, 1),
        ("remove", 1, 2),
    ]
    assert events[0].previous_size == 3


def test_snapshot_is_read_only_copy(filled):
    snapshot = filled.snapshot()
    filled.remove(1)

    assert [u.id for u in snapshot.users] == [1, 2, 3]
    assert isinstance(filled.users, tuple)


def test_loading_status(store):
    store.mark_loading()
    assert store.snapshot().status == "loading"

    store.mark_failed("sin conexión")
    assert store.snapshot().status == "failed"
    assert store.snapshot().error == "sin conexión"


def test_replace_all_rejects_duplicate_ids(filled):
    with pytest.raises(DuplicateUserError):
        filled.replace_all([make_user(1), make_user(2), make_user(2), make_user(3)])

    assert ids(filled) == [1, 2, 3]


def test_remove_leaves_no_entry_with_that_id(filled):
    filled.remove(2)

    assert filled.get(2) is None


def test_synced_flag_follows_collection_lifecycle(store):
    assert not store.synced

    store.replace_all([make_user(1)])
    assert store.synced

    store.logout()
    assert not store.synced


def test_empty_token_is_rejected(store, storage):
    with pytest.raises(ValueError):
        store.login("")

    assert not store.auth.is_authenticated
    assert storage.token is None


def test_empty_stored_token_is_not_a_session():
    assert not StateStore(MemoryTokenStorage("")).auth.is_authenticated
