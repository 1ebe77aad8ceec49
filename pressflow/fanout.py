"""Context fan-out between workflow generations."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from .constants import DEFAULT_MAX_CONCURRENCY
from .contracts import ExecutionContext, WorkflowNode
from .errors import WorkflowAbortError
from .nodes import NodeExecutor

logger = logging.getLogger(__name__)


@dataclass
class FanoutResult:
    """Next generation produced by one node."""

    contexts: List[ExecutionContext] = field(default_factory=list)
    failed: int = 0


class ContextFanout:
    """Runs one node over every live context and collects the next generation.

    A list result spawns one child context per element, any other non-null
    result replaces the context's data in place, and ``None`` drops the
    context. An exception raised for one context drops only that context;
    ``WorkflowAbortError`` is the exception and fails the run.
    """

    def __init__(
        self, executor: NodeExecutor, max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._executor = executor
        self._max_concurrency = max_concurrency

    async def advance(
        self, node: WorkflowNode, contexts: Sequence[ExecutionContext]
    ) -> FanoutResult:
        semaphore = asyncio.Semaphore(self._max_concurrency)
        total = len(contexts)
        logger.info(
            f"Executing node {node.display_name} ({node.type}) with {total} context(s)"
        )

        async def _process(position: int, context: ExecutionContext):
            async with semaphore:
                logger.debug(
                    f"Processing context {position + 1}/{total} for node {node.display_name}"
                )
                try:
                    result = await self._executor.execute(node, context)
                except WorkflowAbortError:
                    raise
                except Exception:
                    logger.exception(
                        f"Error processing context {context.execution_id} for node {node.display_name}"
                    )
                    return None
                return self._expand(node, context, result)

        tasks = [
            asyncio.ensure_future(_process(i, ctx)) for i, ctx in enumerate(contexts)
        ]
        try:
            outcomes = await asyncio.gather(*tasks)
        except WorkflowAbortError:
            for task in tasks:
                task.cancel()
            raise

        next_generation = FanoutResult()
        for outcome in outcomes:
            if outcome is None:
                next_generation.failed += 1
            else:
                next_generation.contexts.extend(outcome)
        logger.info(
            f"Node {node.display_name} completed with {len(next_generation.contexts)} result(s)"
        )
        return next_generation

    @staticmethod
    def _expand(
        node: WorkflowNode, context: ExecutionContext, result
    ) -> List[ExecutionContext]:
        if isinstance(result, list):
            logger.debug(
                f"Node {node.display_name} returned {len(result)} results for {context.execution_id}"
            )
            return [
                context.derive(
                    node, item, execution_id=f"{context.execution_id}-{node.id}-{index}"
                )
                for index, item in enumerate(result)
            ]
        if result is None:
            logger.info(
                f"Node {node.display_name} returned nothing for {context.execution_id}, dropping context"
            )
            return []
        return [context.derive(node, result)]
