from __future__ import annotations

from panel_usuarios.core.search import filter_users, matches

from conftest import make_user

USERS = [
    make_user(1, "George", "Bluth"),
    make_user(2, "Janet", "Weaver"),
    make_user(3, "Emma", "Wong"),
    make_user(4, "Eve", "Holt"),
]


def test_empty_query_returns_window_unchanged():
    assert filter_users(USERS, "") == USERS


def test_match_is_case_insensitive_over_full_name():
    assert [u.id for u in filter_users(USERS, "WE")] == [2]
    assert [u.id for u in filter_users(USERS, "e")] == [1, 2, 3, 4]
    assert matches(USERS[0], "ge bl")


def test_email_is_not_searched():
    assert filter_users(USERS, "reqres") == []


def test_filter_is_idempotent_and_keeps_order():
    once = filter_users(USERS, "o")

    assert [u.id for u in once] == [1, 3, 4]
    assert filter_users(once, "o") == once
