"""Shared fixtures for pressflow tests."""

import pytest

from pressflow.contracts import ExecutionContext
from pressflow.nodes import NodeRegistry
from pressflow.persistence import InMemoryExecutionRepository
from pressflow.services import InMemoryServiceClient

from tests.helpers import FunctionHandler


@pytest.fixture
def services() -> InMemoryServiceClient:
    return InMemoryServiceClient()


@pytest.fixture
def repository() -> InMemoryExecutionRepository:
    return InMemoryExecutionRepository()


@pytest.fixture
def registry() -> NodeRegistry:
    registry = NodeRegistry()
    registry.register(FunctionHandler(lambda data: data), "trigger")
    return registry


@pytest.fixture
def root_context() -> ExecutionContext:
    return ExecutionContext(execution_id="run-1", data={"title": "Seed"})
