from __future__ import annotations

from typing import Any

from ..contracts import ExecutionContext, WorkflowNode
from .base import BaseNodeHandler


class TriggerHandler(BaseNodeHandler):
    """Entry point: passes the trigger payload through unchanged."""

    async def execute(self, node: WorkflowNode, context: ExecutionContext) -> Any:
        return context.data
