"""FastAPI application for the mock catalog API"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog.utils.logger import get_logger

from .auth_routes import router as auth_router
from .db import DatabaseError, JsonDatabase
from .product_routes import router as products_router

logger = get_logger(__name__)

DEFAULT_DB_PATH = "data/db.json"


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Error bodies are always {"message": ...}
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _database_exception_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": "Mock database is unreadable."})


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected request body", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=422, content={"message": "Invalid request body."})


def create_app(db_path: Optional[str | Path] = None) -> FastAPI:
    """
    Build the mock API over the JSON file at db_path (CATALOG_DB_PATH or
    data/db.json by default). A missing file is created from the seed data.
    """
    db = JsonDatabase(db_path or os.getenv("CATALOG_DB_PATH", DEFAULT_DB_PATH))
    db.ensure_seeded()

    app = FastAPI(
        title="Store Catalog Mock API",
        description="Role-partitioned product collections over a flat JSON file",
        version="1.0.0",
    )
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(DatabaseError, _database_exception_handler)

    app.include_router(auth_router)
    app.include_router(products_router)

    logger.info("Mock API ready", db_path=str(db.path))
    return app
