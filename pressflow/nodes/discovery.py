"""Content-discovery nodes.

Each handler performs one remote search and returns one result per
discovered item, so that every article, feed entry or paper continues as an
independent branch. An empty search yields an empty list, which ends the
branch without an error.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..constants import TIME_RANGE_PRESETS
from ..contracts import ExecutionContext, WorkflowNode
from ..errors import ServiceError
from .base import RemoteNodeHandler, context_data

logger = logging.getLogger(__name__)


def resolve_time_window(
    config: Dict[str, Any], now: Optional[datetime] = None
) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(fromDate, toDate)`` for a discovery node's ``timeRange``.

    ``custom`` takes both bounds from the config verbatim. A preset
    (``hour``, ``day``, ``week``, ``month``) yields a lower bound relative to
    ``now``. Anything else leaves the window open.
    """
    time_range = config.get("timeRange")
    if time_range == "custom":
        return config.get("fromDate"), config.get("toDate")

    hours = TIME_RANGE_PRESETS.get(time_range)
    if hours is None:
        return None, None
    now = now or datetime.now(timezone.utc)
    return (now - timedelta(hours=hours)).isoformat(), None


def _items(response: Any, key: str, function_name: str) -> List[Any]:
    if not isinstance(response, dict):
        raise ServiceError(
            function_name, f"expected a JSON object, got {type(response).__name__}"
        )
    return response.get(key) or []


class NewsDiscoveryHandler(RemoteNodeHandler):
    function_name = "news-discovery"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> List[Dict[str, Any]]:
        config = node.config
        from_date, to_date = resolve_time_window(config)
        logger.debug(
            f"News discovery window for {node.display_name}: "
            f"timeRange={config.get('timeRange')} from={from_date} to={to_date}"
        )

        response = await self.call(
            {
                "keywords": config.get("keywords") or ["AI", "technology"],
                "source": config.get("source") or config.get("sources") or "all",
                "maxResults": config.get("maxResults") or 10,
                "timeRange": config.get("timeRange") or "day",
                "fromDate": from_date,
                "toDate": to_date,
                "saveToQueue": True,
            }
        )
        articles = _items(response, "articles", self.function_name)
        logger.info(f"News discovery found {len(articles)} articles")
        if not articles:
            logger.warning(f"No articles found by {node.display_name}")
            return []

        return [
            {
                **article,
                "source_type": "news_discovery",
                "execution_context": context.execution_id,
            }
            for article in articles
        ]


class RssAggregatorHandler(RemoteNodeHandler):
    function_name = "rss-aggregator"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> List[Dict[str, Any]]:
        response = await self.call(
            {
                "feeds": node.config.get("feeds") or [],
                "maxItemsPerFeed": node.config.get("maxItemsPerFeed") or 5,
            }
        )
        items = _items(response, "items", self.function_name)
        logger.info(f"RSS aggregator found {len(items)} items")
        return [
            {**item, "source_type": "rss", "execution_context": context.execution_id}
            for item in items
        ]


class ScholarSearchHandler(RemoteNodeHandler):
    function_name = "google-scholar-search"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> List[Dict[str, Any]]:
        config = node.config
        data = context_data(context)
        response = await self.call(
            {
                "query": config.get("query") or data.get("keywords") or "AI research",
                "maxResults": config.get("maxResults") or 10,
                "yearFrom": config.get("yearFrom"),
                "yearTo": config.get("yearTo"),
                "sort": config.get("sort") or "relevance",
                "language": config.get("language") or "en",
                "includeAbstracts": config.get("includeAbstracts") is not False,
                "includeCitations": bool(config.get("includeCitations", False)),
            }
        )
        papers = _items(response, "papers", self.function_name)
        logger.info(f"Scholar search found {len(papers)} papers")
        if not papers:
            logger.warning(f"No papers found by {node.display_name}")
            return []

        processed_at = datetime.now(timezone.utc).isoformat()
        return [self._to_result(paper, context, processed_at) for paper in papers]

    @staticmethod
    def _to_result(
        paper: Dict[str, Any], context: ExecutionContext, processed_at: str
    ) -> Dict[str, Any]:
        abstract = paper.get("abstract") or ""
        url = paper.get("url") or ""
        authors = paper.get("authors")
        return {
            "title": paper.get("title"),
            "content": abstract,
            "description": abstract,
            "url": url,
            "source_type": "academic",
            "source_url": url,
            "published_date": processed_at,
            "authors": authors if isinstance(authors, list) else [],
            "citations": paper.get("citations") or 0,
            "venue": paper.get("venue") or "",
            "execution_context": context.execution_id,
        }
