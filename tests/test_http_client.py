from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from catalog.auth.models import AuthenticatedUser
from catalog.core.http_client import TRANSPORT_ERROR_MESSAGE, HttpClient
from catalog.core.session_store import SessionStore
from catalog.core.storage import LocalStorage
from catalog.utils.exceptions import ApiError, TransportError


def _response(status_code: int, body=None, content: bytes = b"x"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def store(tmp_path: Path) -> SessionStore:
    return SessionStore(LocalStorage(tmp_path / "storage.json"))


def _login(store: SessionStore, role: str = "admin") -> None:
    store.set_user(AuthenticatedUser(email=f"{role}@test.com", role=role, token="fake.jwt.token"))


def test_role_prefix_and_bearer_header(store):
    session = MagicMock()
    session.request.return_value = _response(200, [])
    client = HttpClient(store, base_url="http://api.local/", session=session)
    _login(store, "tenant")

    client.get("products")

    method, url = session.request.call_args.args
    assert method == "GET"
    assert url == "http://api.local/tenant/products"
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer fake.jwt.token"


def test_opt_out_of_role_prefix_and_no_token_when_logged_out(store):
    session = MagicMock()
    session.request.return_value = _response(200, {"token": "t", "role": "admin"})
    client = HttpClient(store, base_url="http://api.local", session=session)

    client.post("/login", json={"email": "a", "password": "b"}, use_role_prefix=False)

    _, url = session.request.call_args.args
    assert url == "http://api.local/login"
    assert "Authorization" not in session.request.call_args.kwargs["headers"]
    assert "timeout" not in session.request.call_args.kwargs


def test_unauthenticated_requests_are_not_prefixed(store):
    client = HttpClient(store)
    assert client.build_path("/products") == "/products"


def test_error_response_uses_server_message(store):
    session = MagicMock()
    session.request.return_value = _response(401, {"message": "Credenciais inválidas."})
    client = HttpClient(store, session=session)

    with pytest.raises(ApiError) as exc_info:
        client.post("/login", json={}, use_role_prefix=False)
    assert str(exc_info.value) == "Credenciais inválidas."
    assert exc_info.value.status_code == 401
    assert exc_info.value.server_message == "Credenciais inválidas."


def test_error_response_without_json_gets_generic_message(store):
    session = MagicMock()
    session.request.return_value = _response(403, ValueError("no json"))
    client = HttpClient(store, session=session)

    with pytest.raises(ApiError) as exc_info:
        client.delete("/products/1")
    assert "403" in str(exc_info.value)
    assert exc_info.value.server_message is None


def test_no_content_returns_none(store):
    session = MagicMock()
    session.request.return_value = _response(204, None, content=b"")
    client = HttpClient(store, session=session)
    assert client.delete("/products/1") is None


def test_transport_failure_is_normalized(store):
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("connection refused on 10.0.0.1")
    client = HttpClient(store, session=session, max_retries=1)

    with pytest.raises(TransportError) as exc_info:
        client.post("/products", json={"name": "x"})
    assert str(exc_info.value) == TRANSPORT_ERROR_MESSAGE
    assert "10.0.0.1" not in str(exc_info.value)


def test_get_is_retried_on_transport_failure(store, monkeypatch):
    monkeypatch.setattr("tenacity.nap.time.sleep", lambda _seconds: None)
    session = MagicMock()
    session.request.side_effect = [requests.ConnectionError("down"), _response(200, [{"id": 1}])]
    client = HttpClient(store, session=session, max_retries=3)

    assert client.get("/products") == [{"id": 1}]
    assert session.request.call_count == 2


def test_mutations_are_not_retried(store):
    session = MagicMock()
    session.request.side_effect = requests.ConnectionError("down")
    client = HttpClient(store, session=session, max_retries=3)

    with pytest.raises(TransportError):
        client.patch("/products/1", json={"status": "disabled"})
    assert session.request.call_count == 1


def test_configured_timeout_is_forwarded(store):
    session = MagicMock()
    session.request.return_value = _response(200, [])
    client = HttpClient(store, session=session, timeout=2.5)
    client.get("/products")
    assert session.request.call_args.kwargs["timeout"] == 2.5
