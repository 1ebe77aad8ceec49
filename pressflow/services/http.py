"""HTTP client for remote serverless functions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..constants import DEFAULT_SERVICE_TIMEOUT
from ..errors import ServiceError
from ..utils import retry
from .base import ServiceClient

logger = logging.getLogger(__name__)


class HttpServiceClient(ServiceClient):
    """Invoke functions exposed at ``{base_url}/functions/v1/{name}``.

    Transport-level failures are retried up to ``max_retries`` times with
    exponential backoff. Error responses are never retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_SERVICE_TIMEOUT,
        max_retries: int = 0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
            headers["apikey"] = api_key
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def invoke(self, function_name: str, body: Dict[str, Any]) -> Any:
        path = f"/functions/v1/{function_name}"
        attempt = 0
        while True:
            try:
                response = await self._client.post(path, json=body)
                break
            except httpx.TransportError as e:
                if attempt >= self.max_retries:
                    raise ServiceError(function_name, f"request failed: {e}") from e
                attempt += 1
                logger.warning(
                    f"Call to {function_name} failed ({e}), retry {attempt}/{self.max_retries}"
                )
                await retry.schedule_retry(attempt)

        if response.is_error:
            raise ServiceError(
                function_name,
                f"HTTP {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise ServiceError(
                function_name, "response is not valid JSON", response.status_code
            ) from e
