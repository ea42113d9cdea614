"""
Auth routes for the mock API.

POST /login checks the submitted pair against the stored credential records
and answers with the record's provider token and role. Passwords are stored
and compared in plain text; this server only exists for local development
and tests.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from catalog.auth.models import USER_ROLES
from catalog.utils.logger import get_logger

from .db import JsonDatabase
from .deps import get_db

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS_MESSAGE = "Credenciais inválidas."


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: str = "tenant"
    createdAt: Optional[str] = None


@router.post("/login")
async def login(payload: Optional[LoginRequest] = None, db: JsonDatabase = Depends(get_db)) -> Dict[str, Any]:
    """
    Response:
        {"token": "<provider token>", "role": "admin" | "tenant"}
    """
    email = payload.email if payload else None
    password = payload.password if payload else None
    if not email or not password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required.",
        )

    user = db.find_credential(email, password)
    if not user:
        logger.info("Login rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE,
        )
    logger.info("Login accepted", role=user.get("role"))
    return {"token": user.get("token"), "role": user.get("role")}


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: JsonDatabase = Depends(get_db)) -> Dict[str, Any]:
    """
    Add a credential record so the new user can log in.

    Response (201):
        {"id": ..., "name": "...", "email": "...", "role": "...", "createdAt": "..."}
    """
    if not payload.name or not payload.email or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name, email and password are required.",
        )
    if payload.role not in USER_ROLES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid role.")
    if db.email_registered(payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="E-mail já cadastrado.")

    stored = db.add_credential(
        {
            "name": payload.name,
            "email": payload.email,
            "password": payload.password,
            "role": payload.role,
            "token": secrets.token_urlsafe(24),
            "createdAt": payload.createdAt or datetime.now(timezone.utc).isoformat(),
        }
    )
    logger.info("User registered", role=payload.role)
    return {
        "id": stored["id"],
        "name": stored["name"],
        "email": stored["email"],
        "role": stored["role"],
        "createdAt": stored["createdAt"],
    }


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout() -> Response:
    """Nothing to revoke: provider tokens are static. Always 204."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)
