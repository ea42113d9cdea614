"""
Configuration management with schema validation.

Settings come from config/settings.yaml when present; every value may use
``${VAR:default}`` to read from the environment (.env is loaded first).
Without a settings file the built-in defaults below are used, with the same
environment substitution.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigError

SETTINGS_FILENAME = "settings.yaml"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "app": {
        "name": "Store Catalog",
        "version": "1.0.0",
        "environment": "${ENVIRONMENT:development}",
    },
    "api": {
        "base_url": "${CATALOG_API_URL:http://localhost:3333}",
        "max_retries": 3,
    },
    "server": {
        "host": "${HOST:127.0.0.1}",
        "port": "${PORT:3333}",
        "db_path": "${CATALOG_DB_PATH:data/db.json}",
    },
    "storage": {
        "path": "${CATALOG_STORAGE_PATH:data/local_storage.json}",
    },
    "query": {
        "stale_time_seconds": 60,
    },
    "logging": {
        "level": "${LOG_LEVEL:INFO}",
        "format": "${LOG_FORMAT:text}",
        "file_path": "${LOG_FILE:}",
        "max_bytes": 10485760,
        "backup_count": 5,
    },
}


class AppSettings(BaseModel):
    name: str = "Store Catalog"
    version: str = "1.0.0"
    environment: str = "development"


class ApiSettings(BaseModel):
    base_url: str = "http://localhost:3333"
    # None keeps the transport default (no timeout)
    timeout: Optional[float] = None
    max_retries: int = Field(default=3, ge=1)


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3333
    db_path: str = "data/db.json"


class StorageSettings(BaseModel):
    path: str = "data/local_storage.json"


class QuerySettings(BaseModel):
    stale_time_seconds: float = 60.0


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "text"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} and ${VAR:default} expressions"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                resolved = os.getenv(var_name.strip(), default.strip())
            else:
                resolved = os.getenv(var_expr)
                if resolved is None:
                    raise ConfigError(f"Environment variable {var_expr} not found")
            # Empty strings mean "not set" for optional fields
            return resolved if resolved != "" else None
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    return value


def load_settings(config_dir: str = "config") -> Settings:
    """Load and validate settings"""
    load_dotenv()

    raw: Dict[str, Any] = DEFAULT_SETTINGS
    settings_path = Path(config_dir) / SETTINGS_FILENAME
    if settings_path.exists():
        try:
            with open(settings_path, "r", encoding="utf-8") as f:
                file_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid settings file {settings_path}: {e}")
        if not isinstance(file_data, dict):
            raise ConfigError(f"Settings file must contain a mapping: {settings_path}")
        raw = _merge(DEFAULT_SETTINGS, file_data)

    processed = _drop_none(_substitute_env_vars(raw))
    try:
        return Settings(**processed)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid settings: {e}")
