from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

STORE_BACKENDS = ("mongo", "memory")


class ConfigurationError(RuntimeError):
    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name
        self.message = message


def _project_root() -> Path:
    # intake/internal_core/config.py -> intake -> repo root
    return Path(__file__).resolve().parents[2]


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None else value


def _getenv_opt_str(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _getenv_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(name, f"{name} must be an integer, got {value!r}") from exc


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _getenv_list(name: str, default: list[str]) -> list[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class IntakeConfig:
    MONGODB_URI: Optional[str]
    DB_NAME: str
    PUBLIC_BASE: str
    INTAKE_APP_NAME: str
    INTAKE_COLLECTION: str
    INTAKE_STORE_BACKEND: str
    INTAKE_MONGO_TIMEOUT_MS: int
    INTAKE_STATIC_DIR: str
    INTAKE_CORS_ORIGINS: tuple[str, ...]
    INTAKE_EXPOSE_ERROR_DETAIL: bool
    INTAKE_HOST: str
    INTAKE_PORT: int
    INTAKE_LOG_LEVEL: str

    def static_dir_path(self, repo_root: Optional[Path] = None) -> Path:
        root = repo_root if repo_root is not None else _project_root()
        return (root / self.INTAKE_STATIC_DIR).resolve()


def load_config() -> IntakeConfig:
    backend = _getenv_str("INTAKE_STORE_BACKEND", "mongo").strip().lower()
    if backend not in STORE_BACKENDS:
        raise ConfigurationError(
            "INTAKE_STORE_BACKEND",
            f"INTAKE_STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}",
        )

    mongodb_uri = _getenv_opt_str("MONGODB_URI")
    if backend == "mongo" and mongodb_uri is None:
        raise ConfigurationError("MONGODB_URI", "MONGODB_URI is required")

    return IntakeConfig(
        MONGODB_URI=mongodb_uri,
        DB_NAME=_getenv_str("DB_NAME", "meela_poc"),
        PUBLIC_BASE=_getenv_str("PUBLIC_BASE", "http://localhost:5173"),
        INTAKE_APP_NAME=_getenv_str("INTAKE_APP_NAME", "meela-intake-poc"),
        INTAKE_COLLECTION=_getenv_str("INTAKE_COLLECTION", "drafts"),
        INTAKE_STORE_BACKEND=backend,
        INTAKE_MONGO_TIMEOUT_MS=_getenv_int("INTAKE_MONGO_TIMEOUT_MS", 5000),
        INTAKE_STATIC_DIR=_getenv_str("INTAKE_STATIC_DIR", "www"),
        INTAKE_CORS_ORIGINS=tuple(_getenv_list("INTAKE_CORS_ORIGINS", ["*"])),
        INTAKE_EXPOSE_ERROR_DETAIL=_getenv_bool("INTAKE_EXPOSE_ERROR_DETAIL", False),
        INTAKE_HOST=_getenv_str("INTAKE_HOST", "0.0.0.0"),
        INTAKE_PORT=_getenv_int("INTAKE_PORT", 3005),
        INTAKE_LOG_LEVEL=_getenv_str("INTAKE_LOG_LEVEL", "INFO"),
    )
