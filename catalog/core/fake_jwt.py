"""
Fabricated session tokens.

The token only has the shape of a JWT: base64url header, base64url payload and
a fixed placeholder signature. Nothing is signed and nothing is verified; it
exists to carry identity claims through local storage.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Dict

from ..utils.exceptions import TokenDecodeError

HEADER = {"alg": "HS256", "typ": "JWT"}
FAKE_SIGNATURE = "fake-signature"


def _to_base64url(value: str) -> str:
    encoded = base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def _from_base64url(segment: str) -> str:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding).decode("utf-8")


def create_fake_jwt(payload: Dict[str, Any]) -> str:
    """Build ``header.payload.signature`` from the given claims."""
    encoded_header = _to_base64url(json.dumps(HEADER, separators=(",", ":")))
    encoded_payload = _to_base64url(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
    return f"{encoded_header}.{encoded_payload}.{_to_base64url(FAKE_SIGNATURE)}"


def decode_fake_jwt(token: str) -> Dict[str, Any]:
    """Return the claims of a fabricated token. No verification happens."""
    parts = (token or "").split(".")
    if len(parts) != 3:
        raise TokenDecodeError("Token must have three segments")
    try:
        claims = json.loads(_from_base64url(parts[1]))
    except (ValueError, UnicodeDecodeError) as e:
        raise TokenDecodeError(f"Token payload is not valid JSON: {e}")
    if not isinstance(claims, dict):
        raise TokenDecodeError("Token payload must be a JSON object")
    return claims
