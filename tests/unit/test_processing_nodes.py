"""Tests for AI-processing and publisher nodes."""

import pytest

from pressflow.contracts import ExecutionContext
from pressflow.errors import ServiceError
from pressflow.nodes import (
    AiProcessorHandler,
    PublisherHandler,
    ResearchHandler,
    SynthesizerHandler,
    compose_article,
)

from tests.helpers import make_node


@pytest.mark.asyncio
async def test_ai_processor_merges_generated_content(services):
    services.respond("ai-content-generator", {"content": "Generated body"})
    context = ExecutionContext(
        execution_id="ctx", data={"title": "T", "description": "Desc only"}
    )

    result = await AiProcessorHandler(services).execute(
        make_node("a", "ai-processor", tone="casual"), context
    )

    assert result == {
        "title": "T",
        "description": "Desc only",
        "ai_content": {"content": "Generated body"},
        "execution_context": "ctx",
    }
    assert services.calls_to("ai-content-generator") == [
        {
            "prompt": "Generate article content",
            "content": "Desc only",
            "tone": "casual",
            "length": "medium",
        }
    ]


@pytest.mark.asyncio
async def test_research_prefers_configured_query_then_title(services):
    services.respond("perplexity-research", {"answer": "42"})
    handler = ResearchHandler(services)
    context = ExecutionContext(execution_id="ctx", data={"title": "T", "content": "C"})

    result = await handler.execute(make_node("r", "perplexity-research"), context)
    await handler.execute(make_node("r", "perplexity-research", query="Q"), context)
    await handler.execute(
        make_node("r", "perplexity-research"), ExecutionContext(execution_id="empty")
    )

    assert result["research_data"] == {"answer": "42"}
    assert result["source_type"] == "research"
    assert result["content"] == "C"
    queries = [body["query"] for body in services.calls_to("perplexity-research")]
    assert queries == ["T", "Q", "research query"]


@pytest.mark.asyncio
async def test_synthesizer_sends_current_payload(services):
    services.respond("multi-source-synthesizer", "synthesis")
    data = {"title": "T"}

    result = await SynthesizerHandler(services).execute(
        make_node("s", "multi-source-synthesizer", synthesisType="brief"),
        ExecutionContext(execution_id="ctx", data=data),
    )

    assert result["synthesized_content"] == "synthesis"
    assert result["title"] == "T"
    assert services.calls_to("multi-source-synthesizer") == [
        {"sources": [data], "synthesisType": "brief", "tone": "professional"}
    ]


@pytest.mark.asyncio
async def test_ai_processor_propagates_errors(services):
    services.respond("ai-content-generator", ServiceError("ai-content-generator", "down"))
    with pytest.raises(ServiceError):
        await AiProcessorHandler(services).execute(
            make_node("a", "ai-processor"), ExecutionContext(execution_id="ctx")
        )


def test_compose_article_prefers_ai_body_and_summary():
    document = compose_article(
        {
            "title": "Launch",
            "summary": "Short summary",
            "description": "Long description",
            "content": "Raw content",
            "ai_content": {"content": "AI body"},
        }
    )
    assert document == "# Launch\n\nShort summary\n\nAI body"


def test_compose_article_fallbacks():
    assert compose_article({}) == "# Generated Article\n\n\n\n"
    assert compose_article({"description": "D"}) == "# Generated Article\n\nD\n\nD"


@pytest.mark.asyncio
async def test_publisher_creates_draft_by_default(services):
    services.respond("create-article-from-ai", {"id": "article-1"})
    context = ExecutionContext(execution_id="ctx", data={"title": "T", "content": "Body"})

    result = await PublisherHandler(services).execute(make_node("p", "publisher"), context)

    assert result["published_article"] == {"id": "article-1"}
    assert result["title"] == "T"
    [body] = services.calls_to("create-article-from-ai")
    assert body == {
        "content": "# T\n\n\n\nBody",
        "category": "AI Generated",
        "provider": "AI Processor",
        "status": "draft",
        "reporterId": None,
    }


@pytest.mark.asyncio
async def test_publisher_auto_publish_with_reporter(services):
    services.respond("create-article-from-ai", {"id": "article-2"})
    node = make_node(
        "p", "publisher", autoPublish=True, reporterId="rep-9", category="Science"
    )

    await PublisherHandler(services).execute(node, ExecutionContext(execution_id="ctx"))

    [body] = services.calls_to("create-article-from-ai")
    assert body["status"] == "published"
    assert body["reporterId"] == "rep-9"
    assert body["category"] == "Science"
