"""Node type registry and dispatching executor."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .. import constants
from ..contracts import ExecutionContext, WorkflowNode
from ..services import ServiceClient
from .base import BaseNodeHandler
from .discovery import NewsDiscoveryHandler, RssAggregatorHandler, ScholarSearchHandler
from .filter import FilterHandler
from .processing import AiProcessorHandler, ResearchHandler, SynthesizerHandler
from .publisher import PublisherHandler
from .trigger import TriggerHandler

logger = logging.getLogger(__name__)


class NodeRegistry:
    """Maps node type tags to handlers.

    Registries are built explicitly and passed to the executor, so tests can
    swap in fake handlers without touching process-wide state.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, BaseNodeHandler] = {}

    def register(self, handler: BaseNodeHandler, *node_types: str) -> None:
        """Register ``handler`` under one or more type tags.

        Registering a tag twice replaces the earlier handler.
        """
        if not node_types:
            raise ValueError("At least one node type is required")
        for node_type in node_types:
            if node_type in self._handlers:
                logger.debug(f"Replacing handler for node type {node_type}")
            self._handlers[node_type] = handler

    def get(self, node_type: str) -> Optional[BaseNodeHandler]:
        return self._handlers.get(node_type)

    def __contains__(self, node_type: str) -> bool:
        return node_type in self._handlers

    @property
    def node_types(self) -> List[str]:
        return sorted(self._handlers)


def build_default_registry(services: ServiceClient) -> NodeRegistry:
    """Return a registry wired with every built-in node handler."""
    registry = NodeRegistry()
    registry.register(TriggerHandler(), constants.TRIGGER)
    registry.register(NewsDiscoveryHandler(services), constants.NEWS_DISCOVERY)
    registry.register(RssAggregatorHandler(services), constants.RSS_AGGREGATOR)
    registry.register(ScholarSearchHandler(services), constants.SCHOLAR_SEARCH)
    registry.register(ResearchHandler(services), constants.PERPLEXITY_RESEARCH)
    registry.register(SynthesizerHandler(services), constants.MULTI_SOURCE_SYNTHESIZER)
    registry.register(AiProcessorHandler(services), constants.AI_PROCESSOR)
    registry.register(FilterHandler(), constants.FILTER)
    registry.register(PublisherHandler(services), constants.PUBLISHER)
    return registry


class NodeExecutor:
    """Dispatches a node and a context to the handler for ``node.type``."""

    def __init__(self, registry: NodeRegistry) -> None:
        self.registry = registry

    async def execute(self, node: WorkflowNode, context: ExecutionContext) -> Any:
        handler = self.registry.get(node.type)
        if handler is None:
            logger.warning(
                f"Unknown node type {node.type} for node {node.display_name}, passing data through"
            )
            return context.data
        logger.debug(f"Executing node {node.display_name} ({node.type}) with config {node.config}")
        return await handler.execute(node, context)
