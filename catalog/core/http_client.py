"""HTTP client for the catalog REST API"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..utils.exceptions import ApiError, TransportError
from ..utils.logger import get_logger
from .session_store import SessionStore

logger = get_logger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:3333"
TRANSPORT_ERROR_MESSAGE = "Não foi possível conectar ao servidor."
INVALID_RESPONSE_MESSAGE = "Resposta inválida do servidor."


def _server_message(response: Any) -> Optional[str]:
    """The body's ``message`` string, or None when the server sent none."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


def _api_error(response: Any) -> ApiError:
    server_message = _server_message(response)
    message = server_message or f"A requisição falhou (HTTP {response.status_code})."
    return ApiError(message, status_code=response.status_code, server_message=server_message)


class HttpClient:
    """
    Client for the catalog API.

    Every request carries the session's bearer token when one exists, and is
    routed under the session's role prefix (``/admin`` or ``/tenant``) unless
    the caller passes ``use_role_prefix=False``.
    """

    def __init__(
        self,
        session_store: SessionStore,
        base_url: str = DEFAULT_API_BASE_URL,
        session: Optional[Any] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
    ):
        self.session_store = session_store
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.max_retries = max_retries

    def build_path(self, path: str, use_role_prefix: bool = True) -> str:
        safe_path = path if path.startswith("/") else f"/{path}"
        if use_role_prefix:
            return f"{self.session_store.role_prefix}{safe_path}"
        return safe_path

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.session_store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if extra:
            headers.update(extra)
        return headers

    def _send(
        self,
        method: str,
        path: str,
        json: Optional[Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        kwargs: Dict[str, Any] = {"headers": self._headers(headers)}
        if json is not None:
            kwargs["json"] = json
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        logger.debug("Sending API request", method=method, path=path)
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("API request failed before response", method=method, path=path, error=str(e))
            raise TransportError(TRANSPORT_ERROR_MESSAGE) from e

        logger.info("API response", method=method, path=path, status_code=response.status_code)

        if response.status_code >= 400:
            raise _api_error(response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(INVALID_RESPONSE_MESSAGE, status_code=response.status_code) from e

    def request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        use_role_prefix: bool = True,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None when empty).

        Raises:
            ApiError: the server answered with status >= 400
            TransportError: no response was received
        """
        method = method.upper()
        full_path = self.build_path(path, use_role_prefix)
        if method != "GET":
            return self._send(method, full_path, json, headers)

        # Only idempotent reads are retried
        for attempt in Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=8),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        ):
            with attempt:
                return self._send(method, full_path, json, headers)

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, **kwargs: Any) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, **kwargs: Any) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def patch(self, path: str, json: Optional[Any] = None, **kwargs: Any) -> Any:
        return self.request("PATCH", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)
