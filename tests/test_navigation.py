"""Route guards."""

import pytest

from tiffin.navigation import ADMIN, HISTORY_LIMIT, HOME, LOGIN, ORDERS, Navigator
from tiffin.schemas import Role, User
from tiffin.services.storage import MemorySessionStore
from tiffin.state import AuthState


def auth_as(role=None) -> AuthState:
    auth = AuthState(MemorySessionStore())
    if role is not None:
        auth.login("tok", User(id="u", email="u@tiffinbuddy.in", name="U", role=role))
    return auth


@pytest.mark.parametrize("path", [HOME, ORDERS, ADMIN, "/nowhere"])
def test_guest_is_sent_to_login(path):
    nav = Navigator(auth_as())
    assert nav.current == LOGIN
    assert nav.navigate(path) == LOGIN


@pytest.mark.parametrize(
    "role, path, expected",
    [
        (Role.CUSTOMER, HOME, HOME),
        (Role.CUSTOMER, ORDERS, ORDERS),
        (Role.CUSTOMER, ADMIN, HOME),
        (Role.CUSTOMER, "/nowhere", HOME),
        (Role.ADMIN, ADMIN, ADMIN),
        (Role.ADMIN, HOME, HOME),
        (Role.ADMIN, LOGIN, LOGIN),
    ],
)
def test_signed_in_routing(role, path, expected):
    assert Navigator(auth_as(role)).navigate(path) == expected


def test_home_for_role():
    assert Navigator(auth_as(Role.ADMIN)).home_for_role() == ADMIN
    assert Navigator(auth_as(Role.CUSTOMER)).home_for_role() == HOME


def test_history_and_forced_redirect():
    nav = Navigator(auth_as(Role.CUSTOMER))
    nav.navigate(ORDERS)
    assert nav.previous == HOME

    nav.redirect_to_login()
    assert nav.current == LOGIN
    assert list(nav.history) == [HOME, ORDERS, LOGIN]


def test_history_is_capped():
    nav = Navigator(auth_as(Role.CUSTOMER))
    for _ in range(HISTORY_LIMIT * 3):
        nav.navigate(ORDERS)
        nav.navigate(HOME)

    assert len(nav.history) == HISTORY_LIMIT
    assert nav.current == HOME
    assert nav.previous == ORDERS
