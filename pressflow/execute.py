"""Workflow run coordination for pressflow."""

from __future__ import annotations

import logging
import uuid
from typing import Any, List, Optional, Sequence

from .constants import DEFAULT_MAX_CONCURRENCY
from .contracts import (
    ExecutionContext,
    ExecutionStatus,
    ExecutionSummary,
    WorkflowExecution,
    WorkflowNode,
    utcnow,
)
from .fanout import ContextFanout
from .nodes import NodeExecutor, NodeRegistry
from .ordering import GraphOrderer
from .persistence import ExecutionRepository, get_repository

logger = logging.getLogger(__name__)


class WorkflowExecutor:
    """Runs a workflow graph as a data-flow pipeline.

    Each run owns one execution record, created as ``running`` and updated
    exactly once to ``completed`` or ``failed``.
    """

    def __init__(
        self,
        registry: NodeRegistry,
        repository: ExecutionRepository | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        orderer: GraphOrderer | None = None,
    ) -> None:
        self._repository = repository or get_repository()
        self._orderer = orderer or GraphOrderer()
        self._fanout = ContextFanout(NodeExecutor(registry), max_concurrency)

    async def run(
        self,
        workflow_id: str,
        nodes: Sequence[WorkflowNode],
        trigger_data: Optional[Any] = None,
    ) -> WorkflowExecution:
        """Execute ``nodes`` and return the terminal execution record.

        Raises:
            Exception: If the execution record cannot be created, or after
                marking the record ``failed`` for any run-level error
                (circular graph, ``WorkflowAbortError``, store failures).
        """
        logger.info(f"Starting workflow execution for workflow {workflow_id}")
        try:
            execution = await self._repository.insert_execution(
                {
                    "workflow_rule_id": workflow_id,
                    "correlation_id": str(uuid.uuid4()),
                    "status": ExecutionStatus.RUNNING,
                    "started_at": utcnow(),
                }
            )
        except Exception as e:
            logger.error(f"Failed to create workflow execution for {workflow_id}: {e}")
            raise

        try:
            summary = await self._drive(execution, nodes, trigger_data)
            finished = execution.transition(
                ExecutionStatus.COMPLETED, result=summary.model_dump()
            )
            await self._repository.update_execution(
                execution.id, finished.terminal_fields()
            )
        except Exception as e:
            logger.error(f"Workflow execution {execution.id} failed: {e}")
            failed = execution.transition(
                ExecutionStatus.FAILED, error_message=str(e) or type(e).__name__
            )
            try:
                await self._repository.update_execution(
                    execution.id, failed.terminal_fields()
                )
            except Exception as store_error:
                logger.error(
                    f"Could not mark workflow execution {execution.id} as failed: {store_error}"
                )
            raise

        logger.info(
            f"Workflow execution {execution.id} completed with {summary.contexts} result(s)"
        )
        return finished

    async def _drive(
        self,
        execution: WorkflowExecution,
        nodes: Sequence[WorkflowNode],
        trigger_data: Optional[Any],
    ) -> ExecutionSummary:
        plan = self._orderer.execution_plan(nodes)
        contexts: List[ExecutionContext] = [
            ExecutionContext(
                execution_id=execution.id,
                data=trigger_data if trigger_data is not None else {},
            )
        ]
        failed = 0

        for node in plan:
            generation = await self._fanout.advance(node, contexts)
            contexts = generation.contexts
            failed += generation.failed
            if not contexts:
                logger.warning(
                    f"No execution contexts remaining after node {node.display_name}, stopping workflow"
                )
                break

        return ExecutionSummary(
            contexts=len(contexts),
            final_results=[ctx.data for ctx in contexts],
            failed_contexts=failed,
        )
