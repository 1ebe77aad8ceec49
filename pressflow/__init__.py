"""pressflow: data-flow workflow engine for content pipelines."""

from .contracts import (
    ExecutionContext,
    ExecutionStatus,
    ExecutionSummary,
    FilterRule,
    WorkflowExecution,
    WorkflowNode,
)
from .errors import (
    CycleDetectedError,
    InvalidTransitionError,
    PressflowError,
    ServiceError,
    WorkflowAbortError,
)
from .execute import WorkflowExecutor
from .fanout import ContextFanout, FanoutResult
from .nodes import NodeExecutor, NodeRegistry, build_default_registry
from .ordering import GraphOrderer
from .persistence import get_repository
from .services import get_service_client

__version__ = "0.1.0"
__all__ = [
    "WorkflowNode",
    "ExecutionContext",
    "ExecutionStatus",
    "ExecutionSummary",
    "FilterRule",
    "WorkflowExecution",
    "PressflowError",
    "CycleDetectedError",
    "InvalidTransitionError",
    "ServiceError",
    "WorkflowAbortError",
    "GraphOrderer",
    "NodeRegistry",
    "NodeExecutor",
    "build_default_registry",
    "ContextFanout",
    "FanoutResult",
    "WorkflowExecutor",
    "get_repository",
    "get_service_client",
]
