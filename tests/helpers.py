"""Helpers shared by the pressflow test modules."""

from typing import Any, Callable, List

from pressflow.contracts import ExecutionContext, WorkflowNode
from pressflow.nodes import BaseNodeHandler


def make_node(node_id: str, node_type: str, connected=None, **config) -> WorkflowNode:
    return WorkflowNode(
        id=node_id,
        type=node_type,
        label=node_id.upper(),
        config=config,
        connected=connected or [],
    )


class FunctionHandler(BaseNodeHandler):
    """Handler delegating to a plain function of the context data."""

    def __init__(self, func: Callable[[Any], Any]) -> None:
        self.func = func
        self.seen: List[ExecutionContext] = []

    async def execute(self, node, context):
        self.seen.append(context)
        return self.func(context.data)
