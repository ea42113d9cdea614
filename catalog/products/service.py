"""
Products service.

Plain REST mapping over the role-prefixed HTTP client: the same calls reach
/admin/products or /tenant/products depending on the session.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import ValidationError as PydanticValidationError

from ..core.http_client import INVALID_RESPONSE_MESSAGE, HttpClient
from ..utils.exceptions import ApiError
from ..utils.logger import get_logger
from .models import Product, ProductPayload, ProductStatus

logger = get_logger(__name__)

RESOURCE_PATH = "/products"


def _to_product(data: Any) -> Product:
    try:
        return Product.model_validate(data)
    except PydanticValidationError as e:
        logger.warning("Unexpected product payload", error=str(e))
        raise ApiError(INVALID_RESPONSE_MESSAGE) from e


class ProductsService:
    def __init__(self, http_client: HttpClient):
        self.http = http_client

    def fetch_products(self) -> List[Product]:
        data = self.http.get(RESOURCE_PATH) or []
        if not isinstance(data, list):
            raise ApiError(INVALID_RESPONSE_MESSAGE)
        return [_to_product(item) for item in data]

    def fetch_product(self, product_id: int) -> Product:
        return _to_product(self.http.get(f"{RESOURCE_PATH}/{product_id}"))

    def create_product(self, payload: ProductPayload) -> Product:
        created = _to_product(self.http.post(RESOURCE_PATH, json=payload.model_dump()))
        logger.info("Product created", product_id=created.id)
        return created

    def update_product(self, product_id: int, payload: ProductPayload) -> Product:
        updated = _to_product(self.http.put(f"{RESOURCE_PATH}/{product_id}", json=payload.model_dump()))
        logger.info("Product updated", product_id=product_id)
        return updated

    def delete_product(self, product_id: int) -> None:
        self.http.delete(f"{RESOURCE_PATH}/{product_id}")
        logger.info("Product deleted", product_id=product_id)

    def update_product_status(self, product_id: int, status: ProductStatus) -> Product:
        updated = _to_product(self.http.patch(f"{RESOURCE_PATH}/{product_id}", json={"status": status}))
        logger.info("Product status changed", product_id=product_id, status=status)
        return updated
