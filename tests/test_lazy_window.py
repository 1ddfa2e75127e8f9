from __future__ import annotations

import pytest

from panel_usuarios.core.lazy_window import LazyRenderWindow, WindowState

from conftest import make_user


def ten_users():
    return [make_user(i) for i in range(1, 11)]


@pytest.fixture
def bound(store):
    window = LazyRenderWindow(chunk_size=6)
    window.bind(store)
    store.replace_all(ten_users())
    return window


def visible_ids(window):
    return [u.id for u in window.visible()]


def test_new_window_is_empty():
    window = LazyRenderWindow()

    assert window.state is WindowState.EMPTY
    assert window.visible() == []
    assert window.extend() == 0


def test_seed_then_one_extension_exhausts_ten_items():
    window = LazyRenderWindow(chunk_size=6)

    window.seed(ten_users())
    assert window.size == 6
    assert window.state is WindowState.SEEDED

    window.track(6)
    assert window.on_visible(6)
    assert window.size == 10
    assert window.state is WindowState.EXHAUSTED


def test_seed_smaller_than_chunk_is_exhausted_immediately():
    window = LazyRenderWindow(chunk_size=6)

    window.seed([make_user(1), make_user(2), make_user(3)])

    assert visible_ids(window) == [1, 2, 3]
    assert window.state is WindowState.EXHAUSTED


def test_growing_state_between_chunks():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())

    assert window.extend() == 3
    assert window.state is WindowState.GROWING
    assert window.extend() == 3
    assert window.extend() == 1
    assert window.extend() == 0
    assert window.state is WindowState.EXHAUSTED


def test_stale_observer_does_not_extend():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())
    window.track(3)
    window.track(2)

    assert not window.on_visible(3)
    assert window.size == 3


def test_one_visibility_report_extends_once_until_retracked():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())
    window.track(3)

    assert window.on_visible(3)
    assert not window.on_visible(3)
    assert window.size == 6

    window.track(6)
    assert window.on_visible(6)
    assert window.size == 9


def test_untracked_window_ignores_visibility():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())
    window.track(None)

    assert not window.on_visible(3)


def test_loading_guard_blocks_extension():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())
    window.track(3)
    window.loading = True

    assert not window.on_visible(3)
    assert window.extend() == 0

    window.loading = False
    assert window.on_visible(3)


def test_visibility_before_seed_is_ignored():
    window = LazyRenderWindow()
    window.track(1)

    assert not window.on_visible(1)


def test_exhausted_window_is_inert():
    window = LazyRenderWindow(chunk_size=6)
    window.seed([make_user(1)])
    window.track(1)

    assert not window.on_visible(1)
    assert window.size == 1


def test_invalid_chunk_size():
    with pytest.raises(ValueError):
        LazyRenderWindow(chunk_size=0)


def test_bound_window_reseeds_on_replace_all(store, bound):
    assert visible_ids(bound) == [1, 2, 3, 4, 5, 6]

    store.replace_all([make_user(20), make_user(21)])

    assert visible_ids(bound) == [20, 21]
    assert bound.state is WindowState.EXHAUSTED


def test_remove_inside_window_shrinks_it(store, bound):
    store.remove(2)

    assert visible_ids(bound) == [1, 3, 4, 5, 6]
    assert bound.size == 5


def test_remove_outside_window_keeps_it(store, bound):
    store.remove(9)

    assert visible_ids(bound) == [1, 2, 3, 4, 5, 6]


def test_remove_applies_while_loading(store, bound):
    bound.loading = True

    store.remove(1)

    assert visible_ids(bound) == [2, 3, 4, 5, 6]


def test_replace_is_reflected_in_place(store, bound):
    store.replace(make_user(3, "Emma", "Wong"))

    assert bound.visible()[2].full_name == "Emma Wong"
    assert bound.size == 6


def test_append_to_exhausted_window_is_shown(store, bound):
    bound.extend()
    assert bound.exhausted

    store.append(make_user(11))

    assert visible_ids(bound)[-1] == 11
    assert bound.exhausted


def test_append_to_partial_window_waits_for_scroll(store, bound):
    store.append(make_user(11))

    assert visible_ids(bound) == [1, 2, 3, 4, 5, 6]
    bound.extend()
    assert visible_ids(bound)[-1] == 11


def test_unbind_stops_patching(store, bound):
    bound.unbind()
    store.remove(1)

    assert bound.size == 6


def test_bound_window_refuses_foreign_collection(bound):
    with pytest.raises(ValueError):
        bound.seed([make_user(99)])

    assert bound.size == 6


def test_reveal_extends_until_user_is_visible():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())

    assert window.reveal(8)
    assert window.size == 9
    assert window.reveal(2)
    assert window.size == 9


def test_reveal_unknown_user_stops_when_exhausted():
    window = LazyRenderWindow(chunk_size=3)
    window.seed(ten_users())

    assert not window.reveal(404)
    assert window.exhausted
