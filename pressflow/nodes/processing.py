"""Research, synthesis and AI-processing nodes.

These always return a single result: the branch's existing data with one
extra field holding the remote response.
"""

from __future__ import annotations

from typing import Any, Dict

from ..contracts import ExecutionContext, WorkflowNode
from .base import RemoteNodeHandler, context_data


def _first_text(data: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return ""


class ResearchHandler(RemoteNodeHandler):
    function_name = "perplexity-research"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> Dict[str, Any]:
        data = context_data(context)
        query = node.config.get("query") or _first_text(
            data, "title", "content", "description"
        )
        response = await self.call(
            {
                "query": query or "research query",
                "mode": node.config.get("mode") or "comprehensive",
            }
        )
        return {
            **data,
            "research_data": response,
            "source_type": "research",
            "execution_context": context.execution_id,
        }


class SynthesizerHandler(RemoteNodeHandler):
    function_name = "multi-source-synthesizer"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> Dict[str, Any]:
        data = context_data(context)
        response = await self.call(
            {
                "sources": [data],
                "synthesisType": node.config.get("synthesisType") or "comprehensive",
                "tone": node.config.get("tone") or "professional",
            }
        )
        return {
            **data,
            "synthesized_content": response,
            "execution_context": context.execution_id,
        }


class AiProcessorHandler(RemoteNodeHandler):
    function_name = "ai-content-generator"

    async def execute(
        self, node: WorkflowNode, context: ExecutionContext
    ) -> Dict[str, Any]:
        data = context_data(context)
        response = await self.call(
            {
                "prompt": node.config.get("prompt") or "Generate article content",
                "content": _first_text(data, "content", "description"),
                "tone": node.config.get("tone") or "professional",
                "length": node.config.get("length") or "medium",
            }
        )
        return {
            **data,
            "ai_content": response,
            "execution_context": context.execution_id,
        }
