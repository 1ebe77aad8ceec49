"""Node handlers and dispatch."""

from __future__ import annotations

from .base import BaseNodeHandler, RemoteNodeHandler
from .discovery import (
    NewsDiscoveryHandler,
    RssAggregatorHandler,
    ScholarSearchHandler,
    resolve_time_window,
)
from .filter import FilterHandler
from .processing import AiProcessorHandler, ResearchHandler, SynthesizerHandler
from .publisher import PublisherHandler, compose_article
from .registry import NodeExecutor, NodeRegistry, build_default_registry
from .trigger import TriggerHandler

__all__ = [
    "BaseNodeHandler",
    "RemoteNodeHandler",
    "TriggerHandler",
    "NewsDiscoveryHandler",
    "RssAggregatorHandler",
    "ScholarSearchHandler",
    "ResearchHandler",
    "SynthesizerHandler",
    "AiProcessorHandler",
    "FilterHandler",
    "PublisherHandler",
    "NodeRegistry",
    "NodeExecutor",
    "build_default_registry",
    "compose_article",
    "resolve_time_window",
]
