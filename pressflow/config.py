from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_SERVICE_TIMEOUT


class ServicesConfig(BaseModel):
    """Configuration for the remote function services."""

    backend: Literal["http", "inmemory"] = "http"
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = DEFAULT_SERVICE_TIMEOUT
    max_retries: int = Field(default=0, ge=0)


class EngineConfig(BaseModel):
    """Workflow engine tuning."""

    max_concurrency: int = Field(default=DEFAULT_MAX_CONCURRENCY, ge=1)


class PressflowConfig(BaseModel):
    """Top-level configuration model."""

    services: ServicesConfig = ServicesConfig()
    engine: EngineConfig = EngineConfig()
    database_url: Optional[str] = None
    log_level: str = "INFO"


def load_config(path: Optional[str] = None) -> PressflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to PRESSFLOW_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("PRESSFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = PressflowConfig(**data)
    else:
        config = PressflowConfig()

    env_db_url = os.getenv("PRESSFLOW_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    env_services_url = os.getenv("PRESSFLOW_SERVICES_URL")
    if env_services_url:
        config.services.base_url = env_services_url
    env_services_key = os.getenv("PRESSFLOW_SERVICES_KEY")
    if env_services_key:
        config.services.api_key = env_services_key
    return config
