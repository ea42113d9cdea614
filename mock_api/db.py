"""
Flat-file datastore for the mock API.

The whole database is one JSON document:

    {"login": [...credential records...],
     "admin": {"products": [...]},
     "tenant": {"products": [...]}}

It is read on every request and rewritten atomically after every mutation.
There is no locking; concurrent writers race and the last write wins.
"""

from __future__ import annotations

import copy
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from catalog.utils.logger import get_logger

logger = get_logger(__name__)

ROLES = ("admin", "tenant")


class DatabaseError(Exception):
    """The database file exists but is not a usable JSON document"""
    pass


SEED_DATA: Dict[str, Any] = {
    "login": [
        {"email": "admin@test.com", "password": "123", "role": "admin", "token": "admin-provider-token"},
        {"email": "tenant@test.com", "password": "123", "role": "tenant", "token": "tenant-provider-token"},
    ],
    "admin": {
        "products": [
            {
                "id": 1,
                "name": "Notebook",
                "price": 3500,
                "image": "",
                "description": "Notebook de alta performance",
                "status": "activated",
            },
            {
                "id": 2,
                "name": "Monitor",
                "price": 1500,
                "image": "",
                "description": "Monitor 4K com HDR",
                "status": "disabled",
            },
        ]
    },
    "tenant": {
        "products": [
            {
                "id": 1,
                "name": "Mouse",
                "price": 150,
                "image": "",
                "description": "Mouse sem fio",
                "status": "activated",
            },
            {
                "id": 2,
                "name": "Teclado",
                "price": 250,
                "image": "",
                "description": "Teclado mecânico",
                "status": "disabled",
            },
        ]
    },
}


def _atomic_write(path: Path, payload: Dict[str, Any]) -> None:
    """Atomically write JSON to the target path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="w", dir=str(path.parent), delete=False, encoding="utf-8"
    ) as tf:
        json.dump(payload, tf, indent=2, ensure_ascii=False)
        temp_path = Path(tf.name)
    try:
        shutil.move(str(temp_path), str(path))
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def next_id(records: List[Dict[str, Any]]) -> int:
    """max(existing ids, 0) + 1"""
    return max((int(r.get("id", 0)) for r in records), default=0) + 1


def find_record(records: List[Dict[str, Any]], record_id: int) -> Optional[Dict[str, Any]]:
    return next((r for r in records if r.get("id") == record_id), None)


class JsonDatabase:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def ensure_seeded(self) -> None:
        """Write the seed document when no database file exists yet."""
        if self.path.exists():
            return
        _atomic_write(self.path, copy.deepcopy(SEED_DATA))
        logger.info("Seeded mock database", path=str(self.path))

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return copy.deepcopy(SEED_DATA)
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error("Corrupt mock database", path=str(self.path), error=str(e))
            raise DatabaseError(f"Mock database is not valid JSON: {self.path}") from e
        if not isinstance(data, dict):
            logger.error("Corrupt mock database", path=str(self.path), error="not a JSON object")
            raise DatabaseError(f"Mock database must be a JSON object: {self.path}")
        return data

    def save(self, data: Dict[str, Any]) -> None:
        _atomic_write(self.path, data)

    # -- Credentials --

    def find_credential(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        for record in self.load().get("login", []):
            if record.get("email") == email and record.get("password") == password:
                return record
        return None

    def email_registered(self, email: str) -> bool:
        return any(r.get("email") == email for r in self.load().get("login", []))

    def add_credential(self, record: Dict[str, Any]) -> Dict[str, Any]:
        data = self.load()
        credentials = data.setdefault("login", [])
        stored = {**record, "id": next_id(credentials)}
        credentials.append(stored)
        self.save(data)
        return stored

    # -- Products --

    def list_products(self, role: str) -> List[Dict[str, Any]]:
        return self.load().get(role, {}).get("products", [])

    def get_product(self, role: str, product_id: int) -> Optional[Dict[str, Any]]:
        return find_record(self.list_products(role), product_id)

    def insert_product(self, role: str, product: Dict[str, Any]) -> Dict[str, Any]:
        data = self.load()
        products = data.setdefault(role, {}).setdefault("products", [])
        created = {**product, "id": next_id(products)}
        products.append(created)
        self.save(data)
        return created

    def replace_product(self, role: str, product_id: int, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        data = self.load()
        products = data.setdefault(role, {}).setdefault("products", [])
        for index, existing in enumerate(products):
            if existing.get("id") == product_id:
                products[index] = record
                self.save(data)
                return record
        return None

    def delete_product(self, role: str, product_id: int) -> bool:
        data = self.load()
        products = data.setdefault(role, {}).setdefault("products", [])
        remaining = [p for p in products if p.get("id") != product_id]
        if len(remaining) == len(products):
            return False
        data[role]["products"] = remaining
        self.save(data)
        return True
