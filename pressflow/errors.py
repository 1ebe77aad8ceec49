"""Exception hierarchy for pressflow."""

from __future__ import annotations

from typing import Optional


class PressflowError(Exception):
    """Base class for all pressflow errors."""


class CycleDetectedError(PressflowError):
    """Raised when the workflow graph contains a circular dependency."""

    def __init__(self, node_id: str) -> None:
        super().__init__(
            f"Circular dependency detected in workflow at node '{node_id}'"
        )
        self.node_id = node_id


class ServiceError(PressflowError):
    """A remote service call failed or returned an error response."""

    def __init__(
        self, function_name: str, message: str, status_code: Optional[int] = None
    ) -> None:
        super().__init__(f"{function_name}: {message}")
        self.function_name = function_name
        self.status_code = status_code


class WorkflowAbortError(PressflowError):
    """Raised by a node handler to fail the whole run instead of one branch."""


class InvalidTransitionError(PressflowError):
    """Illegal status change on a workflow execution record."""
