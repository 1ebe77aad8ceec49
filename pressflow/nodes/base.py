"""Base node handler interface."""

from __future__ import annotations

import abc
from typing import Any, Dict

from ..contracts import ExecutionContext, WorkflowNode
from ..services import ServiceClient


class BaseNodeHandler(metaclass=abc.ABCMeta):
    """Executes one node for one execution context.

    ``execute`` returns ``None`` to drop the branch, a list to fan out one
    branch per element, or any other value to replace the branch's data.
    """

    @abc.abstractmethod
    async def execute(self, node: WorkflowNode, context: ExecutionContext) -> Any:
        raise NotImplementedError


class RemoteNodeHandler(BaseNodeHandler):
    """Handler backed by a single call to a remote function."""

    function_name: str = ""

    def __init__(self, services: ServiceClient) -> None:
        self._services = services

    async def call(self, body: Dict[str, Any]) -> Any:
        return await self._services.invoke(self.function_name, body)


def context_data(context: ExecutionContext) -> Dict[str, Any]:
    """Return the context payload as a dict, treating non-mappings as empty."""
    return context.data if isinstance(context.data, dict) else {}
