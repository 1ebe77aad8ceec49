from __future__ import annotations

import logging
from typing import Any, Dict

from ..contracts import ExecutionContext, WorkflowNode
from .base import RemoteNodeHandler, context_data

logger = logging.getLogger(__name__)


def compose_article(data: Dict[str, Any]) -> str:
    """Build the markdown document published for a branch."""
    ai_content = data.get("ai_content")
    ai_body = ai_content.get("content") if isinstance(ai_content, dict) else None
    body = ai_body or data.get("content") or data.get("description") or ""
    title = data.get("title") or "Generated Article"
    lead = data.get("summary") or data.get("description") or ""
    return f"# {title}\n\n{lead}\n\n{body}"


class PublisherHandler(RemoteNodeHandler):
    """Terminal node creating an article from the accumulated branch data."""

    function_name = "create-article-from-ai"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> Dict[str, Any]:
        data = context_data(context)
        config = node.config
        status = "published" if config.get("autoPublish") else "draft"
        logger.info(
            f"Publishing '{data.get('title') or 'Generated Article'}' as {status} "
            f"for context {context.execution_id}"
        )

        response = await self.call(
            {
                "content": compose_article(data),
                "category": config.get("category") or "AI Generated",
                "provider": "AI Processor",
                "status": status,
                "reporterId": config.get("reporterId") or None,
            }
        )
        return {
            **data,
            "published_article": response,
            "execution_context": context.execution_id,
        }
