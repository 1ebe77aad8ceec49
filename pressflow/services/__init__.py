"""Service client factory and initialization."""

from __future__ import annotations

import os
from typing import Optional

from ..config import PressflowConfig, load_config
from .base import ServiceClient
from .http import HttpServiceClient
from .inmemory import InMemoryServiceClient


def get_service_client(
    backend: Optional[str] = None, config: Optional[PressflowConfig] = None
) -> ServiceClient:
    """Factory function to get the configured service client."""

    config = config or load_config()
    services = config.services
    backend = (
        backend or os.getenv("PRESSFLOW_SERVICES_BACKEND") or services.backend
    ).lower()

    if backend == "inmemory":
        return InMemoryServiceClient()
    elif backend == "http":
        if not services.base_url:
            raise ValueError(
                "HTTP service backend requires services.base_url or PRESSFLOW_SERVICES_URL"
            )
        return HttpServiceClient(
            services.base_url,
            api_key=services.api_key,
            timeout=services.timeout,
            max_retries=services.max_retries,
        )
    else:
        raise ValueError(f"Unsupported service backend: {backend}")


__all__ = [
    "ServiceClient",
    "HttpServiceClient",
    "InMemoryServiceClient",
    "get_service_client",
]
