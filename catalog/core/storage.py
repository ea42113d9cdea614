"""
Durable key/value storage for the client.

A single JSON file holds string values under string keys, the same contract
browser local storage offers. Writes go through a temp file and a move so a
crash never leaves a half-written file behind.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)


def _atomic_write(path: Path, payload: Dict[str, str]) -> None:
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


class LocalStorage:
    """String key/value store persisted to a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Failed to read local storage, starting empty", path=str(self.path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        return self._load_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load_all()
        data[key] = str(value)
        _atomic_write(self.path, data)

    def remove_item(self, key: str) -> None:
        data = self._load_all()
        if key in data:
            del data[key]
            _atomic_write(self.path, data)

    def clear(self) -> None:
        _atomic_write(self.path, {})
