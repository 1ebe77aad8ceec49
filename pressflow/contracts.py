"""Core data contracts for pressflow workflow runs."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidTransitionError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowNode(BaseModel):
    """One configurable processing step in a workflow graph."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    label: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)
    connected: List[str] = Field(default_factory=list)

    @property
    def metadata_key(self) -> str:
        """Key under which this node's result is recorded in context metadata."""
        return f"{self.type}_{self.id}"

    @property
    def display_name(self) -> str:
        return self.label or self.id


class ExecutionContext(BaseModel):
    """One in-flight branch of data flowing through the pipeline."""

    execution_id: str
    data: Any = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def derive(
        self, node: WorkflowNode, data: Any, execution_id: Optional[str] = None
    ) -> "ExecutionContext":
        """Return a successor context carrying ``data`` produced by ``node``.

        The parent's metadata is copied, never mutated, so sibling branches
        spawned from the same parent do not share history.
        """
        return ExecutionContext(
            execution_id=execution_id or self.execution_id,
            data=data,
            metadata={**self.metadata, node.metadata_key: data},
        )


class ExecutionStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({ExecutionStatus.COMPLETED, ExecutionStatus.FAILED})


class ExecutionSummary(BaseModel):
    """Aggregate stored as the ``result`` of a completed execution."""

    contexts: int
    final_results: List[Any] = Field(default_factory=list)
    failed_contexts: int = 0


class WorkflowExecution(BaseModel):
    """Persisted lifecycle record for one workflow run."""

    id: str
    workflow_rule_id: str
    correlation_id: str
    status: ExecutionStatus = ExecutionStatus.RUNNING
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    result: Optional[Dict[str, Any]] = None
    error_message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition(
        self,
        status: ExecutionStatus,
        result: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> "WorkflowExecution":
        """Return the terminal copy of this record.

        Raises:
            InvalidTransitionError: If the record already reached a terminal
                status or ``status`` is not terminal.
        """
        status = ExecutionStatus(status)
        if self.is_terminal:
            raise InvalidTransitionError(
                f"Execution {self.id} is already {self.status.value}"
            )
        if status not in TERMINAL_STATUSES:
            raise InvalidTransitionError(
                f"Cannot move execution {self.id} from {self.status.value} to {status.value}"
            )
        return self.model_copy(
            update={
                "status": status,
                "completed_at": utcnow(),
                "result": result,
                "error_message": error_message,
            }
        )

    def terminal_fields(self) -> Dict[str, Any]:
        """Fields written to the store on the terminal update."""
        return {
            "status": self.status.value,
            "completed_at": self.completed_at,
            "result": self.result,
            "error_message": self.error_message,
        }


class FilterRule(BaseModel):
    """A single rule evaluated by a filter node."""

    type: str
    operator: Optional[str] = None
    value: Any = None
