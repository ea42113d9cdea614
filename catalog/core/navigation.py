"""
Named routes and the authentication guard.

Public routes (login, register) bounce authenticated users to the products
page; every other route requires a session.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from .session_store import SessionStore


@dataclass(frozen=True)
class Route:
    name: str
    path: str
    public: bool = False


@dataclass
class Location:
    name: str
    path: str
    query: Dict[str, str] = field(default_factory=dict)


ROUTES: Dict[str, Route] = {
    "login": Route(name="login", path="/login", public=True),
    "register": Route(name="register", path="/cadastro", public=True),
    "products": Route(name="products", path="/produtos"),
}
ROOT_REDIRECT = "login"
HISTORY_LIMIT = 50


class Navigator:
    def __init__(self, session_store: SessionStore):
        self.session_store = session_store
        self.current: Optional[Location] = None
        self.history: Deque[Location] = deque(maxlen=HISTORY_LIMIT)

    def resolve(self, name: str) -> Route:
        """Apply the guard and return the route that will actually be shown."""
        if name in ("", "/"):
            name = ROOT_REDIRECT
        route = ROUTES.get(name)
        if route is None:
            raise KeyError(f"Unknown route: {name}")

        authenticated = self.session_store.is_authenticated
        if route.public:
            if route.name in ("login", "register") and authenticated:
                return ROUTES["products"]
            return route
        if not authenticated:
            return ROUTES["login"]
        return route

    def push(self, name: str, query: Optional[Dict[str, str]] = None) -> Location:
        route = self.resolve(name)
        # Query only follows when the guard did not redirect
        location = Location(
            name=route.name,
            path=route.path,
            query=dict(query or {}) if route.name == name else {},
        )
        self.current = location
        self.history.append(location)
        return location
