"""Repository abstraction for workflow execution records."""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from ..contracts import WorkflowExecution

EXECUTION_COLUMNS = (
    "id",
    "workflow_rule_id",
    "correlation_id",
    "status",
    "started_at",
    "completed_at",
    "result",
    "error_message",
)


class ExecutionRepository(Protocol):
    """Protocol for execution-record persistence backends."""

    async def insert_execution(self, fields: Dict[str, Any]) -> WorkflowExecution:
        """Persist a new execution record and return it with its id."""

    async def update_execution(self, execution_id: str, fields: Dict[str, Any]) -> None:
        """Apply the terminal update to a running execution.

        Raises:
            InvalidTransitionError: If no running execution has this id.
        """

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        """Retrieve an execution by id."""

    async def list_executions(
        self, workflow_rule_id: Optional[str] = None
    ) -> list[WorkflowExecution]:
        """Return persisted executions, optionally for one workflow rule."""


def check_update_fields(fields: Dict[str, Any]) -> None:
    if not fields:
        raise ValueError("No execution fields to update")
    unknown = set(fields) - set(EXECUTION_COLUMNS[1:])
    if unknown:
        raise ValueError(f"Unknown execution fields: {sorted(unknown)}")
