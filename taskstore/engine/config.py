"""
TaskStore Configuration — Load and validate taskstore.yaml at startup.

Environment variables override the file, so a deployment can keep the
password out of YAML:

    DBUSER, DBPASS, DBHOST, DBPORT, DBNAME   — individual URL components
    TASKSTORE_DATABASE_URL                   — the whole URL (wins)

Usage:
    from taskstore.engine.config import load_config, require_database_url
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, field_validator, model_validator
from sqlalchemy.engine import URL

from taskstore.engine.errors import TaskStoreConfigError

CONFIG_FILENAME = "taskstore.yaml"

# Environment variable -> DatabaseConfig field
ENV_OVERRIDES = {
    "DBUSER": "user",
    "DBPASS": "password",
    "DBHOST": "host",
    "DBPORT": "port",
    "DBNAME": "name",
}
URL_ENV_VAR = "TASKSTORE_DATABASE_URL"


class DatabaseConfig(BaseModel):
    scheme: str = "postgresql+psycopg2"
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    name: Optional[str] = None
    url: Optional[str] = None
    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800
    pool_pre_ping: bool = True

    @model_validator(mode="after")
    def compose_url(self) -> "DatabaseConfig":
        if self.url is None and not self.missing_parts():
            self.url = URL.create(
                self.scheme,
                username=self.user,
                password=self.password,
                host=self.host,
                port=self.port,
                database=self.name,
            ).render_as_string(hide_password=False)
        return self

    def missing_parts(self) -> list:
        """URL components that are still empty (only meaningful without url)."""
        if self.url:
            return []
        parts = {
            "user": self.user,
            "password": self.password,
            "host": self.host,
            "port": self.port,
            "name": self.name,
        }
        return [k for k, v in parts.items() if not v]


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{v}'")
        return v


class StoreConfig(BaseModel):
    """Root model for taskstore.yaml."""
    name: str = "TaskStore"
    environment: str = "dev"
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ("dev", "staging", "prod"):
            raise ValueError(f"environment must be dev/staging/prod, got '{v}'")
        return v


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Walk up from *start* (default CWD) looking for taskstore.yaml."""
    current = start or Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def apply_env_overrides(
    data: Dict[str, Any], environ: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Merge DB* variables into the raw ``database`` section."""
    env = os.environ if environ is None else environ
    database = dict(data.get("database") or {})

    overridden = False
    for var, field in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            database[field] = value
            overridden = True

    if env.get(URL_ENV_VAR):
        database["url"] = env[URL_ENV_VAR]
    elif overridden:
        # Components changed: the file's url no longer describes them
        database.pop("url", None)

    data = dict(data)
    data["database"] = database
    return data


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StoreConfig:
    """
    Load and validate taskstore.yaml, then apply environment overrides.

    Args:
        config_path: Explicit path. If None, auto-discovers from CWD upwards.
        environ: Mapping used for overrides (defaults to os.environ).

    Returns:
        Validated StoreConfig. A missing file yields defaults.

    Raises:
        TaskStoreConfigError: the file is not valid YAML or fails validation.
    """
    path = Path(config_path) if config_path else find_config_file()

    raw: Dict[str, Any] = {}
    if path is not None and path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise TaskStoreConfigError(f"Invalid YAML in {path}: {exc}", path=str(path)) from exc
        if not isinstance(raw, dict):
            raise TaskStoreConfigError(f"{path} must contain a mapping", path=str(path))

    raw = apply_env_overrides(raw, environ)

    try:
        return StoreConfig(**raw)
    except ValueError as exc:
        raise TaskStoreConfigError(f"Invalid configuration: {exc}", path=str(path)) from exc


def require_database_url(config: StoreConfig) -> str:
    """Return the database URL or fail naming every missing component."""
    db = config.database
    if db.url:
        return db.url
    missing = db.missing_parts()
    raise TaskStoreConfigError(
        "Database URL is incomplete, missing: " + ", ".join(missing),
        missing=missing,
    )
