"""In-memory service client for testing."""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import ServiceError
from .base import ServiceClient

Responder = Callable[[Dict[str, Any]], Any]


class InMemoryServiceClient(ServiceClient):
    """Serve canned responses keyed by function name and record every call.

    A response may be a plain value, a callable taking the request body
    (sync or async), or an exception instance which is raised.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None) -> None:
        self._responses: Dict[str, Any] = dict(responses or {})
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def respond(self, function_name: str, response: Any) -> None:
        self._responses[function_name] = response

    def calls_to(self, function_name: str) -> List[Dict[str, Any]]:
        return [body for name, body in self.calls if name == function_name]

    async def invoke(self, function_name: str, body: Dict[str, Any]) -> Any:
        self.calls.append((function_name, copy.deepcopy(body)))
        if function_name not in self._responses:
            raise ServiceError(function_name, "no response configured")

        response = self._responses[function_name]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            response = response(body)
            if asyncio.iscoroutine(response):
                response = await response
        return copy.deepcopy(response)
