"""
Auth models.

Credentials and registration payloads are transient form input; only
AuthenticatedUser is ever persisted (by the session store).
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["admin", "tenant"]
USER_ROLES = ("admin", "tenant")


class UserCredentials(BaseModel):
    email: str
    password: str


class RegisterPayload(BaseModel):
    name: str
    email: str
    password: str
    role: UserRole = "tenant"


class AuthResponse(BaseModel):
    """Body of a successful POST /login."""

    token: str
    role: UserRole


class AuthenticatedUser(BaseModel):
    """Session identity persisted under the session storage key."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    role: UserRole
    token: str  # fabricated, see catalog.core.fake_jwt
    provider_token: Optional[str] = Field(default=None, alias="providerToken")

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
