"""
Authentication service layer.

Maps login, registration and logout onto the unprefixed auth endpoints.
Every failure comes out as AuthError carrying a user-facing message; raw
transport exceptions never escape.
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from ..core.background import run_detached
from ..core.fake_jwt import create_fake_jwt
from ..core.http_client import HttpClient
from ..core.session_store import SessionStore
from ..utils.exceptions import ApiError, AuthError, CatalogError
from ..utils.logger import get_logger
from .models import AuthenticatedUser, AuthResponse, RegisterPayload, UserCredentials

logger = get_logger(__name__)

LOGIN_ERROR_MESSAGE = "Não foi possível efetuar o login."
REGISTER_ERROR_MESSAGE = "Não foi possível concluir o cadastro."

# Expiry window carried in the fabricated token
TOKEN_TTL_SECONDS = 60 * 60


def _normalize_error(error: CatalogError, fallback: str) -> AuthError:
    if isinstance(error, ApiError):
        return AuthError(error.server_message or fallback)
    return AuthError(fallback)


class AuthService:
    def __init__(self, http_client: HttpClient, session_store: SessionStore):
        self.http = http_client
        self.session_store = session_store

    def login(self, credentials: UserCredentials) -> AuthenticatedUser:
        """
        Authenticate against POST /login and build the session identity.

        The session store is not touched; callers decide when to persist.
        """
        try:
            body = self.http.post("/login", json=credentials.model_dump(), use_role_prefix=False)
        except CatalogError as e:
            logger.info("Login rejected", error=str(e))
            raise _normalize_error(e, LOGIN_ERROR_MESSAGE) from e

        try:
            data = AuthResponse.model_validate(body)
        except PydanticValidationError as e:
            logger.warning("Unexpected login response", error=str(e))
            raise AuthError(LOGIN_ERROR_MESSAGE) from e

        issued_at = int(time.time())
        token = create_fake_jwt(
            {
                "email": credentials.email,
                "role": data.role,
                "iat": issued_at,
                "exp": issued_at + TOKEN_TTL_SECONDS,
                "providerToken": data.token,
            }
        )
        logger.info("Login succeeded", role=data.role)
        return AuthenticatedUser(
            email=credentials.email,
            role=data.role,
            token=token,
            provider_token=data.token,
        )

    def logout(self) -> Optional[threading.Thread]:
        """
        Send a best-effort revocation notice and clear the local session.

        The notice runs detached; the session is cleared whatever happens to
        it. Returns the background thread, or None when nobody was logged in.
        """
        handle: Optional[threading.Thread] = None
        token = self.session_store.token
        if token:
            # Token is captured before clear() so the notice still carries it
            handle = run_detached(
                self.http.post,
                "/logout",
                use_role_prefix=False,
                headers={"Authorization": f"Bearer {token}"},
                name="logout-notice",
            )
        self.session_store.clear()
        logger.info("Session cleared")
        return handle

    def register_user(self, payload: RegisterPayload) -> None:
        body = payload.model_dump()
        body["createdAt"] = datetime.now(timezone.utc).isoformat()
        try:
            self.http.post("/register", json=body, use_role_prefix=False)
        except CatalogError as e:
            logger.info("Registration rejected", error=str(e))
            raise _normalize_error(e, REGISTER_ERROR_MESSAGE) from e
        logger.info("User registered", role=payload.role)
