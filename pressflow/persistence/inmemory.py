"""In-memory implementation of the execution repository."""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from ..contracts import ExecutionStatus, WorkflowExecution
from ..errors import InvalidTransitionError
from .repository import ExecutionRepository, check_update_fields


class InMemoryExecutionRepository(ExecutionRepository):
    """Store execution records in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._executions: Dict[str, WorkflowExecution] = {}

    async def insert_execution(self, fields: Dict[str, Any]) -> WorkflowExecution:
        data = dict(fields)
        data.setdefault("id", str(uuid.uuid4()))
        execution = WorkflowExecution.model_validate(data)
        if execution.id in self._executions:
            raise ValueError(f"Execution {execution.id} already exists")
        self._executions[execution.id] = execution
        return execution.model_copy()

    async def update_execution(self, execution_id: str, fields: Dict[str, Any]) -> None:
        check_update_fields(fields)
        current = self._executions.get(execution_id)
        if current is None or current.status != ExecutionStatus.RUNNING:
            raise InvalidTransitionError(
                f"Execution {execution_id} not found or not running"
            )
        self._executions[execution_id] = WorkflowExecution.model_validate(
            {**current.model_dump(), **fields}
        )

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        execution = self._executions.get(execution_id)
        return execution.model_copy() if execution else None

    async def list_executions(
        self, workflow_rule_id: Optional[str] = None
    ) -> list[WorkflowExecution]:
        return [
            e.model_copy()
            for e in self._executions.values()
            if workflow_rule_id is None or e.workflow_rule_id == workflow_rule_id
        ]
