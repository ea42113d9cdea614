from pathlib import Path
from typing import Any, List, Tuple

import pytest
from fastapi.testclient import TestClient

from catalog.auth.models import UserCredentials
from catalog.context import AppContext, create_context
from catalog.utils.config import ApiSettings, Settings, StorageSettings
from mock_api.app import create_app


class RecordingSession:
    """Delegates to the TestClient and remembers every (method, url) sent."""

    def __init__(self, client: TestClient):
        self.client = client
        self.calls: List[Tuple[str, str]] = []
        self.headers: List[dict] = []

    def request(self, method: str, url: str, **kwargs: Any):
        self.calls.append((method, url))
        self.headers.append(dict(kwargs.get("headers") or {}))
        return self.client.request(method, url, **kwargs)

    def calls_with(self, method: str) -> List[str]:
        return [url for m, url in self.calls if m == method]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db.json"


@pytest.fixture
def api_client(db_path: Path) -> TestClient:
    return TestClient(create_app(db_path))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api=ApiSettings(base_url="http://testserver", max_retries=1),
        storage=StorageSettings(path=str(tmp_path / "local_storage.json")),
    )


@pytest.fixture
def recorder(api_client: TestClient) -> RecordingSession:
    return RecordingSession(api_client)


@pytest.fixture
def context(settings: Settings, recorder: RecordingSession) -> AppContext:
    return create_context(settings, http_session=recorder).load()


@pytest.fixture
def login_as(context: AppContext):
    """Log the context in through the real /login endpoint."""

    def _login(email: str, password: str = "123"):
        user = context.auth_service.login(UserCredentials(email=email, password=password))
        context.session_store.set_user(user)
        return user

    return _login
