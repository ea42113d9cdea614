"""
Products list view-model.

Reads go through the query cache under ("products", role). Every mutation
invalidates that key on success and stores a readable ``error_message`` on
failure. Status changes and deletion are admin-only; for other roles the
request is never sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..core.mutation import Mutation
from ..utils.exceptions import CatalogError, PermissionDeniedError, ValidationError
from ..utils.logger import get_logger
from .models import Product, ProductPayload, ProductStatus, toggled_status

if TYPE_CHECKING:
    from ..context import AppContext

logger = get_logger(__name__)

PRODUCTS_QUERY_KEY = ("products",)
AUTO_CONFIRM_DELETE_KEY = "store.e2e.autoConfirmDelete"
ADMIN_ONLY_MESSAGE = "Apenas administradores podem alterar o status ou excluir produtos."
INVALID_PRODUCT_MESSAGE = "Preencha nome e preço válidos para o produto."


def build_product_payload(**fields: Any) -> ProductPayload:
    """Validate raw form fields. Raises ValidationError before any request is made."""
    name = str(fields.get("name") or "").strip()
    if not name:
        raise ValidationError(INVALID_PRODUCT_MESSAGE)
    try:
        return ProductPayload(**{**fields, "name": name})
    except PydanticValidationError as e:
        raise ValidationError(INVALID_PRODUCT_MESSAGE) from e


@dataclass
class ProductsViewState:
    selected_product: Optional[Product] = None
    is_dialog_open: bool = False


class ProductsViewModel:
    def __init__(self, context: "AppContext"):
        self.context = context
        self.service = context.products_service
        self.state = ProductsViewState()
        self.error_message: Optional[str] = None

        self.create_mutation: Mutation[Product] = self._mutation(self.service.create_product, "create_product")
        self.update_mutation: Mutation[Product] = self._mutation(self.service.update_product, "update_product")
        self.delete_mutation: Mutation[None] = self._mutation(self.service.delete_product, "delete_product")
        self.status_mutation: Mutation[Product] = self._mutation(
            self.service.update_product_status, "update_product_status"
        )

    def _mutation(self, fn: Callable[..., Any], name: str) -> Mutation:
        return Mutation(fn, on_success=self._on_mutation_success, on_error=self._on_error, name=name)

    @property
    def is_admin(self) -> bool:
        return self.context.session_store.role == "admin"

    @property
    def query_key(self) -> Tuple[str, str]:
        return (*PRODUCTS_QUERY_KEY, self.context.session_store.role or "guest")

    # -- Queries --

    def fetch_products(self) -> List[Product]:
        """Cached product list; empty when nobody is logged in or the fetch failed."""
        if not self.context.session_store.is_authenticated:
            return []
        cache = self.context.query_cache
        if cache.is_fresh(self.query_key):
            return cache.get(self.query_key)
        try:
            products = cache.fetch(self.query_key, self.service.fetch_products)
        except CatalogError as e:
            self._on_error(e)
            return cache.get(self.query_key) or []
        # A fresh list from the server supersedes any earlier failure
        self.error_message = None
        return products

    @property
    def products(self) -> List[Product]:
        return self.fetch_products()

    @property
    def active_products(self) -> List[Product]:
        return [p for p in self.products if p.status == "activated"]

    @property
    def inactive_products(self) -> List[Product]:
        return [p for p in self.products if p.status == "disabled"]

    def refresh(self) -> List[Product]:
        self.invalidate_products()
        return self.fetch_products()

    def invalidate_products(self) -> None:
        self.context.query_cache.invalidate(self.query_key)

    # -- Selection --

    def select_product(self, product: Optional[Product]) -> None:
        self.state.selected_product = product

    def clear_selection(self) -> None:
        self.state.selected_product = None

    def toggle_dialog(self, open_: bool) -> None:
        self.state.is_dialog_open = open_

    # -- Mutations --

    def _on_mutation_success(self, _result: Any) -> None:
        self.error_message = None
        self.invalidate_products()

    def _on_error(self, error: CatalogError) -> None:
        self.error_message = str(error)

    def _require_admin(self, action: str, product_id: int) -> bool:
        if self.is_admin:
            return True
        logger.warning("Blocked admin-only action", action=action, product_id=product_id, role=self.context.session_store.role)
        self._on_error(PermissionDeniedError(ADMIN_ONLY_MESSAGE))
        return False

    def create_product(self, payload: ProductPayload) -> Optional[Product]:
        return self.create_mutation.mutate(payload)

    def update_product(self, product_id: int, payload: ProductPayload) -> Optional[Product]:
        return self.update_mutation.mutate(product_id, payload)

    def update_product_status(self, product_id: int, status: ProductStatus) -> Optional[Product]:
        if not self._require_admin("update_product_status", product_id):
            return None
        return self.status_mutation.mutate(product_id, status)

    def toggle_product_status(self, product: Product) -> Optional[Product]:
        return self.update_product_status(product.id, toggled_status(product.status))

    def should_auto_confirm_delete(self) -> bool:
        return self.context.storage.get_item(AUTO_CONFIRM_DELETE_KEY) == "true"

    def delete_product(self, product_id: int, confirm: Optional[Callable[[int], bool]] = None) -> bool:
        """
        Delete a product after confirmation.

        ``confirm`` is asked unless the auto-confirm storage flag is set.
        Returns True when the product was deleted.
        """
        if not self._require_admin("delete_product", product_id):
            return False
        if confirm is not None and not self.should_auto_confirm_delete():
            if not confirm(product_id):
                return False
        self.delete_mutation.mutate(product_id)
        if self.delete_mutation.is_success and self.state.selected_product and self.state.selected_product.id == product_id:
            self.clear_selection()
        return self.delete_mutation.is_success
