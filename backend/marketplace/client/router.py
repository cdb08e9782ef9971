"""
Role-gated navigation.

`authorize` is the whole access policy and does no I/O; the Router only
matches a path against the route table and asks `authorize` about it.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from marketplace.client.session import Session, SessionStore
from marketplace.domain import Role, exhaustive

SIGN_IN_PATH = "/signin"
DEFAULT_PATH = "/"
NOT_FOUND_PAGE = "not-found"


@dataclass(frozen=True)
class Render:
    page: str = ""
    params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RedirectToSignIn:
    to: str = SIGN_IN_PATH


@dataclass(frozen=True)
class RedirectToDefault:
    to: str = DEFAULT_PATH


Decision = Union[Render, RedirectToSignIn, RedirectToDefault]


def authorize(
    session: Optional[Session],
    required_role: Optional[Role],
    page: str = "",
    params: Optional[dict[str, str]] = None,
) -> Decision:
    if required_role is None:
        return Render(page, params or {})
    if session is None:
        return RedirectToSignIn()
    if session.role != required_role:
        return RedirectToDefault()
    return Render(page, params or {})


LANDING_PAGES = exhaustive(
    {
        Role.USER: "/",
        Role.ORGANIZER: "/organizer-portal",
        Role.ADMIN: "/admin",
        Role.DOCTOR: "/medical",
        Role.PROPERTY_OWNER: "/",
    },
    Role,
)


def landing_page(role: Role) -> str:
    """Where a freshly signed-in user of `role` goes."""
    return LANDING_PAGES[role]


@dataclass(frozen=True)
class Route:
    path: str
    page: str
    required_role: Optional[Role] = None

    @property
    def pattern(self) -> "re.Pattern[str]":
        return _compile(self.path)


def _compile(path: str) -> "re.Pattern[str]":
    wildcard = path.endswith("/*")
    if wildcard:
        path = path[:-2]
    parts = []
    for segment in path.strip("/").split("/"):
        if segment.startswith(":"):
            parts.append(f"(?P<{segment[1:]}>[^/]+)")
        elif segment:
            parts.append(re.escape(segment))
    regex = "/" + "/".join(parts)
    if wildcard:
        regex = regex.rstrip("/") + "(?:/.*)?"
    return re.compile(f"^{regex}/?$")


ROUTES: tuple[Route, ...] = (
    Route("/", "home"),
    Route("/events", "events"),
    Route("/events/:id", "event-detail"),
    Route("/medical", "medical"),
    Route("/signin", "signin"),
    Route("/signup", "signup"),
    Route("/organizer-login", "organizer-signin"),
    Route("/organizer-signup", "organizer-signup"),
    Route("/doctor-login", "doctor-signin"),
    Route("/admin-login", "admin-signin"),
    Route("/organizer-portal", "organizer-dashboard", Role.ORGANIZER),
    Route("/organizer-portal/events", "organizer-events", Role.ORGANIZER),
    Route("/organizer-portal/events/new", "create-event", Role.ORGANIZER),
    Route("/organizer-portal/*", "organizer-dashboard", Role.ORGANIZER),
    Route("/admin", "admin-dashboard", Role.ADMIN),
    Route("/admin/events/pending", "pending-events", Role.ADMIN),
    Route("/admin/events/:id", "event-review", Role.ADMIN),
)


class Router:
    def __init__(self, store: SessionStore, routes: tuple[Route, ...] = ROUTES):
        self.store = store
        self._table = [(route, route.pattern) for route in routes]

    def match(self, path: str) -> Optional[tuple[Route, dict[str, str]]]:
        path = path.split("?", 1)[0].split("#", 1)[0] or "/"
        for route, pattern in self._table:
            found = pattern.match(path)
            if found:
                return route, found.groupdict()
        return None

    def resolve(self, path: str) -> Decision:
        matched = self.match(path)
        if matched is None:
            return Render(NOT_FOUND_PAGE)
        route, params = matched
        return authorize(self.store.session, route.required_role, route.page, params)
