"""
Tests for the role-gated router.
"""

import pytest

from marketplace.client.router import (
    LANDING_PAGES,
    RedirectToDefault,
    RedirectToSignIn,
    Render,
    Router,
    authorize,
    landing_page,
)
from marketplace.client.session import Session, SessionUser
from marketplace.domain import Role

from conftest import user_json


def session_for(role: Role) -> Session:
    return Session(token="tok", user=SessionUser.model_validate(user_json(role.value)), durable=False)


@pytest.mark.parametrize("required", [None, *Role])
def test_anonymous_access(required):
    decision = authorize(None, required)
    if required is None:
        assert isinstance(decision, Render)
    else:
        assert decision == RedirectToSignIn("/signin")


@pytest.mark.parametrize("role", list(Role))
@pytest.mark.parametrize("required", list(Role))
def test_role_matrix(role, required):
    decision = authorize(session_for(role), required)
    if role == required:
        assert isinstance(decision, Render)
    else:
        assert decision == RedirectToDefault("/")


def test_every_role_has_a_landing_page():
    assert set(LANDING_PAGES) == set(Role)
    assert landing_page(Role.ORGANIZER) == "/organizer-portal"
    assert landing_page(Role.ADMIN) == "/admin"


def test_router_extracts_params(store):
    store.login("tok", user_json("admin"))
    decision = Router(store).resolve("/admin/events/42?tab=tickets")
    assert decision == Render("event-review", {"id": "42"})


def test_router_public_pages_need_no_session(store):
    assert Router(store).resolve("/events/7") == Render("event-detail", {"id": "7"})
    assert Router(store).resolve("/") == Render("home")


def test_router_gates_by_role(store):
    router = Router(store)
    assert router.resolve("/organizer-portal/events/new") == RedirectToSignIn()

    store.login("tok", user_json("user"))
    assert router.resolve("/organizer-portal/events/new") == RedirectToDefault()

    store.logout()
    store.login("tok", user_json("organizer"))
    assert router.resolve("/organizer-portal/events/new") == Render("create-event")
    assert router.resolve("/organizer-portal/anything/else") == Render("organizer-dashboard")
    assert router.resolve("/admin") == RedirectToDefault()


def test_router_unknown_path(store):
    assert Router(store).resolve("/no/such/page") == Render("not-found")
