"""Shared FastAPI dependencies for the mock API routers."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from .db import ROLES, JsonDatabase


def get_db(request: Request) -> JsonDatabase:
    return request.app.state.db


def require_role(role: str) -> str:
    """Only the admin and tenant collections exist."""
    if role not in ROLES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Role not found.")
    return role
