"""
Login and registration view-models.

They own the form state, decide when submission is allowed, and turn service
failures into ``error_message`` instead of raising.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Optional

from ..core.mutation import Mutation
from ..utils.exceptions import CatalogError
from .models import USER_ROLES, AuthenticatedUser, RegisterPayload, UserCredentials
from .service import LOGIN_ERROR_MESSAGE, REGISTER_ERROR_MESSAGE

if TYPE_CHECKING:
    from ..context import AppContext

PRODUCTS_QUERY_PREFIX = ("products",)
MIN_PASSWORD_LENGTH = 3


@dataclass
class LoginForm:
    email: str = ""
    password: str = ""


@dataclass
class RegisterForm:
    name: str = ""
    email: str = ""
    password: str = ""
    role: str = "tenant"


class LoginViewModel:
    def __init__(self, context: "AppContext"):
        self.context = context
        self.form = LoginForm()
        self.error_message: Optional[str] = None
        self.mutation: Mutation[AuthenticatedUser] = Mutation(
            context.auth_service.login,
            on_success=self._on_success,
            on_error=self._on_error,
            name="login",
        )

    @property
    def is_form_valid(self) -> bool:
        return self.form.email != "" and self.form.password != ""

    @property
    def is_submitting(self) -> bool:
        return self.mutation.is_pending

    def update_field(self, field: str, value: str) -> None:
        if field not in ("email", "password"):
            raise ValueError(f"Unknown login field: {field}")
        setattr(self.form, field, value)
        if self.error_message:
            self.error_message = None

    def _on_success(self, user: AuthenticatedUser) -> None:
        self.context.session_store.set_user(user)
        self.error_message = None
        self.context.query_cache.invalidate(PRODUCTS_QUERY_PREFIX)
        self.context.navigator.push("products")

    def _on_error(self, error: CatalogError) -> None:
        self.error_message = str(error) or LOGIN_ERROR_MESSAGE

    def submit(self) -> Optional[AuthenticatedUser]:
        if not self.is_form_valid:
            return None
        return self.mutation.mutate(
            UserCredentials(email=self.form.email.strip(), password=self.form.password)
        )


class RegisterViewModel:
    def __init__(self, context: "AppContext"):
        self.context = context
        self.form = RegisterForm()
        self.confirm_password = ""
        self.error_message: Optional[str] = None
        self.mutation: Mutation[None] = Mutation(
            context.auth_service.register_user,
            on_success=self._on_success,
            on_error=self._on_error,
            name="register",
        )

    @property
    def is_password_length_valid(self) -> bool:
        return len(self.form.password) >= MIN_PASSWORD_LENGTH

    @property
    def do_passwords_match(self) -> bool:
        return self.form.password == self.confirm_password

    @property
    def is_form_valid(self) -> bool:
        has_required_fields = (
            self.form.name.strip() != ""
            and self.form.email.strip() != ""
            and self.is_password_length_valid
        )
        return has_required_fields and self.do_passwords_match

    @property
    def is_submitting(self) -> bool:
        return self.mutation.is_pending

    def update_field(self, field: str, value: str) -> None:
        if field == "role":
            # Anything but a known role is ignored
            if value in USER_ROLES:
                self.form.role = value
            return
        if field not in ("name", "email", "password"):
            raise ValueError(f"Unknown register field: {field}")
        setattr(self.form, field, value)
        if self.error_message:
            self.error_message = None

    def update_confirm_password(self, value: str) -> None:
        self.confirm_password = value
        if self.error_message:
            self.error_message = None

    def _on_success(self, _result: None) -> None:
        self.error_message = None
        self.context.navigator.push("login", query={"registered": "true"})

    def _on_error(self, error: CatalogError) -> None:
        self.error_message = str(error) or REGISTER_ERROR_MESSAGE

    def submit(self) -> bool:
        if not self.is_form_valid:
            return False
        self.mutation.mutate(RegisterPayload(**asdict(self.form)))
        return self.mutation.is_success
