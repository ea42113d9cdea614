"""
Per-client application context.

Everything a service or view-model needs (settings, storage, session, HTTP
client, query cache, navigator and services) lives on one AppContext that is
passed in explicitly. Nothing is shared through module globals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .auth.service import AuthService
from .core.http_client import HttpClient
from .core.navigation import Navigator
from .core.query_cache import QueryCache
from .core.session_store import SessionStore
from .core.storage import LocalStorage
from .products.service import ProductsService
from .utils.config import Settings
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    storage: LocalStorage
    session_store: SessionStore
    http_client: HttpClient
    query_cache: QueryCache
    navigator: Navigator
    auth_service: AuthService
    products_service: ProductsService

    def load(self) -> "AppContext":
        """Restore the persisted session."""
        user = self.session_store.load()
        logger.info("Client context loaded", authenticated=user is not None)
        return self

    def teardown(self) -> None:
        """Drop the session and every cached query."""
        self.session_store.clear()
        self.query_cache.clear()


def create_context(settings: Optional[Settings] = None, http_session: Optional[Any] = None) -> AppContext:
    """
    Build a context from settings. Call load() on the result to restore the
    persisted session.

    ``http_session`` replaces the requests.Session used for API calls (tests
    pass a FastAPI TestClient here).
    """
    settings = settings or Settings()
    storage = LocalStorage(settings.storage.path)
    session_store = SessionStore(storage)
    http_client = HttpClient(
        session_store,
        base_url=settings.api.base_url,
        session=http_session,
        timeout=settings.api.timeout,
        max_retries=settings.api.max_retries,
    )
    return AppContext(
        settings=settings,
        storage=storage,
        session_store=session_store,
        http_client=http_client,
        query_cache=QueryCache(stale_time_seconds=settings.query.stale_time_seconds),
        navigator=Navigator(session_store),
        auth_service=AuthService(http_client, session_store),
        products_service=ProductsService(http_client),
    )
