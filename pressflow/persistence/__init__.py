"""Persistence layer for workflow execution records."""

from __future__ import annotations

import os
from typing import Callable, Dict, Optional

from ..config import PressflowConfig, load_config
from .inmemory import InMemoryExecutionRepository
from .repository import ExecutionRepository
from .sqlite import SQLiteExecutionRepository

try:  # pragma: no cover - optional dependency
    from .postgres import PostgresExecutionRepository
except ImportError:  # pragma: no cover - optional dependency
    PostgresExecutionRepository = None  # type: ignore

_repository_instance: ExecutionRepository | None = None


def _sqlite_backend(database_url: str) -> ExecutionRepository:
    return SQLiteExecutionRepository(database_url.split("://", 1)[1])


def _postgres_backend(database_url: str) -> ExecutionRepository:
    if PostgresExecutionRepository is None:
        raise RuntimeError("Postgres support requires the 'postgres' extra (asyncpg)")
    return PostgresExecutionRepository(database_url)


BACKENDS: Dict[str, Callable[[str], ExecutionRepository]] = {
    "sqlite": _sqlite_backend,
    "postgres": _postgres_backend,
    "postgresql": _postgres_backend,
}


def resolve_database_url(
    database_url: Optional[str] = None, config: Optional[PressflowConfig] = None
) -> Optional[str]:
    """Explicit URL, then ``PRESSFLOW_DATABASE_URL``, ``DATABASE_URL``, config."""
    if database_url:
        return database_url
    config = config or load_config()
    return (
        os.getenv("PRESSFLOW_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or config.database_url
    )


def create_repository(database_url: Optional[str]) -> ExecutionRepository:
    """Build a fresh repository for ``database_url``; no URL means in-memory."""
    if not database_url:
        return InMemoryExecutionRepository()
    scheme = database_url.split("://", 1)[0].lower() if "://" in database_url else ""
    backend = BACKENDS.get(scheme)
    if backend is None:
        raise ValueError(f"Unsupported database backend: {database_url}")
    return backend(database_url)


def get_repository(
    database_url: Optional[str] = None, config: Optional[PressflowConfig] = None
) -> ExecutionRepository:
    """Return the process-wide repository, building it on first use.

    Passing ``database_url`` or ``config`` always builds and caches a new one.
    """
    global _repository_instance
    if _repository_instance is None or database_url is not None or config is not None:
        _repository_instance = create_repository(
            resolve_database_url(database_url, config)
        )
    return _repository_instance


__all__ = [
    "BACKENDS",
    "ExecutionRepository",
    "InMemoryExecutionRepository",
    "SQLiteExecutionRepository",
    "PostgresExecutionRepository",
    "create_repository",
    "get_repository",
    "resolve_database_url",
]
