"""Base interface for remote content, AI and publish services."""

from __future__ import annotations

import abc
from typing import Any, Dict


class ServiceClient(metaclass=abc.ABCMeta):
    """Invokes a named remote function with a JSON body."""

    async def aclose(self) -> None:
        """Release any underlying connections (no-op by default)."""
        pass

    async def __aenter__(self) -> "ServiceClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @abc.abstractmethod
    async def invoke(self, function_name: str, body: Dict[str, Any]) -> Any:
        """Call ``function_name`` and return its decoded response.

        Raises:
            ServiceError: If the call fails or the remote reports an error.
        """
        raise NotImplementedError
