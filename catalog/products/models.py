"""
Product models.

ProductPatch lists the only fields a client may change; apply_patch() is the
single place where an update is merged into an existing record.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import BaseModel, Field

ProductStatus = Literal["activated", "disabled"]
PRODUCT_STATUSES = ("activated", "disabled")


class ProductPayload(BaseModel):
    """Product fields sent on create and full replace."""

    name: str
    price: float = Field(ge=0)
    image: str = ""
    description: str = ""
    status: ProductStatus = "activated"


class Product(ProductPayload):
    id: int


class ProductPatch(BaseModel):
    """Partial update. Unset fields keep their current value."""

    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    image: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProductStatus] = None


def apply_patch(record: Mapping[str, Any], patch: ProductPatch) -> Dict[str, Any]:
    """
    Merge patch into a product record and return the new record.

    Fields set in the patch win; every other field, and always the id, keeps
    its current value. The input is not modified.
    """
    changes = patch.model_dump(exclude_unset=True, exclude_none=True)
    merged = {**record, **changes}
    if "id" in record:
        merged["id"] = record["id"]
    return merged


def toggled_status(status: ProductStatus) -> ProductStatus:
    return "disabled" if status == "activated" else "activated"
