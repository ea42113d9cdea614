"""
Product routes for the mock API.

/{role}/products for role in (admin, tenant). Lookups are linear scans and
new ids are max(existing ids, 0) + 1. There is no admin/tenant capability
check here: the client hides status changes and deletion from tenants.
"""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from catalog.products.models import ProductPatch, ProductPayload, apply_patch
from catalog.utils.logger import get_logger

from .db import JsonDatabase
from .deps import get_db, require_role

logger = get_logger(__name__)

router = APIRouter(prefix="/{role}/products", tags=["products"])

PRODUCT_NOT_FOUND = "Product not found."


def _parse_id(product_id: str) -> int:
    # Non-numeric ids can never match a record
    try:
        return int(product_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)


def _existing(db: JsonDatabase, role: str, product_id: int) -> Dict[str, Any]:
    existing = db.get_product(role, product_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    return existing


@router.get("")
async def list_products(role: str = Depends(require_role), db: JsonDatabase = Depends(get_db)) -> List[Dict[str, Any]]:
    return db.list_products(role)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductPayload,
    role: str = Depends(require_role),
    db: JsonDatabase = Depends(get_db),
) -> Dict[str, Any]:
    created = db.insert_product(role, payload.model_dump(mode="json"))
    logger.info("Product created", role=role, product_id=created["id"])
    return created


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    role: str = Depends(require_role),
    db: JsonDatabase = Depends(get_db),
) -> Dict[str, Any]:
    return _existing(db, role, _parse_id(product_id))


def _update(db: JsonDatabase, role: str, product_id: str, patch: ProductPatch) -> Dict[str, Any]:
    pid = _parse_id(product_id)
    updated = apply_patch(_existing(db, role, pid), patch)
    db.replace_product(role, pid, updated)
    return updated


@router.put("/{product_id}")
async def replace_product(
    product_id: str,
    patch: ProductPatch,
    role: str = Depends(require_role),
    db: JsonDatabase = Depends(get_db),
) -> Dict[str, Any]:
    updated = _update(db, role, product_id, patch)
    logger.info("Product replaced", role=role, product_id=updated["id"])
    return updated


@router.patch("/{product_id}")
async def patch_product(
    product_id: str,
    patch: ProductPatch,
    role: str = Depends(require_role),
    db: JsonDatabase = Depends(get_db),
) -> Dict[str, Any]:
    updated = _update(db, role, product_id, patch)
    logger.info("Product patched", role=role, product_id=updated["id"])
    return updated


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    role: str = Depends(require_role),
    db: JsonDatabase = Depends(get_db),
) -> Response:
    pid = _parse_id(product_id)
    if not db.delete_product(role, pid):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)
    logger.info("Product deleted", role=role, product_id=pid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
