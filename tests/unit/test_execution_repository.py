import uuid

import pytest

from pressflow.config import PressflowConfig
from pressflow.contracts import ExecutionStatus, utcnow
from pressflow.errors import InvalidTransitionError
from pressflow.persistence import (
    InMemoryExecutionRepository,
    SQLiteExecutionRepository,
    create_repository,
    get_repository,
    resolve_database_url,
)


@pytest.fixture(params=["inmemory", "sqlite"])
def repo(request, tmp_path):
    if request.param == "sqlite":
        return SQLiteExecutionRepository(tmp_path / "executions.db")
    return InMemoryExecutionRepository()


def _fields(workflow_id="wf-1"):
    return {
        "workflow_rule_id": workflow_id,
        "correlation_id": str(uuid.uuid4()),
        "status": ExecutionStatus.RUNNING,
        "started_at": utcnow(),
    }


@pytest.mark.asyncio
async def test_repository_crud(repo):
    fields = _fields()
    execution = await repo.insert_execution(fields)

    assert execution.id
    assert execution.status == ExecutionStatus.RUNNING
    assert execution.completed_at is None

    finished = execution.transition(
        ExecutionStatus.COMPLETED,
        result={"contexts": 1, "final_results": [{"title": "x"}], "failed_contexts": 0},
    )
    await repo.update_execution(execution.id, finished.terminal_fields())

    stored = await repo.get_execution(execution.id)
    assert stored is not None
    assert stored.status == ExecutionStatus.COMPLETED
    assert stored.correlation_id == fields["correlation_id"]
    assert stored.started_at == fields["started_at"]
    assert stored.completed_at is not None
    assert stored.result["final_results"] == [{"title": "x"}]
    assert stored.error_message is None


@pytest.mark.asyncio
async def test_terminal_record_cannot_be_updated(repo):
    execution = await repo.insert_execution(_fields())
    failed = execution.transition(ExecutionStatus.FAILED, error_message="boom")
    await repo.update_execution(execution.id, failed.terminal_fields())

    with pytest.raises(InvalidTransitionError):
        await repo.update_execution(execution.id, {"status": "completed"})

    stored = await repo.get_execution(execution.id)
    assert stored.status == ExecutionStatus.FAILED
    assert stored.error_message == "boom"


@pytest.mark.asyncio
async def test_update_unknown_execution(repo):
    with pytest.raises(InvalidTransitionError):
        await repo.update_execution("nope", {"status": "completed"})
    assert await repo.get_execution("nope") is None


@pytest.mark.asyncio
async def test_update_rejects_unknown_fields(repo):
    execution = await repo.insert_execution(_fields())
    with pytest.raises(ValueError):
        await repo.update_execution(execution.id, {"colour": "blue"})
    with pytest.raises(ValueError):
        await repo.update_execution(execution.id, {})


@pytest.mark.asyncio
async def test_list_executions_by_workflow(repo):
    first = await repo.insert_execution(_fields("wf-a"))
    await repo.insert_execution(_fields("wf-b"))

    everything = await repo.list_executions()
    only_a = await repo.list_executions("wf-a")

    assert len(everything) == 2
    assert [e.id for e in only_a] == [first.id]


@pytest.mark.asyncio
async def test_sqlite_records_survive_reopen(tmp_path):
    path = tmp_path / "executions.db"
    execution = await SQLiteExecutionRepository(path).insert_execution(_fields())

    reopened = SQLiteExecutionRepository(path)
    stored = await reopened.get_execution(execution.id)

    assert stored is not None
    assert stored.workflow_rule_id == "wf-1"


def test_get_repository_selects_backend(tmp_path, monkeypatch):
    monkeypatch.delenv("PRESSFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)

    sqlite_repo = get_repository(f"sqlite://{tmp_path / 'x.db'}")
    memory_repo = get_repository(config=PressflowConfig())

    assert isinstance(sqlite_repo, SQLiteExecutionRepository)
    assert isinstance(memory_repo, InMemoryExecutionRepository)
    with pytest.raises(ValueError):
        get_repository("mysql://localhost/db")


def test_create_repository_dispatches_on_scheme(tmp_path):
    assert isinstance(create_repository(None), InMemoryExecutionRepository)
    assert isinstance(
        create_repository(f"SQLite://{tmp_path / 'y.db'}"), SQLiteExecutionRepository
    )
    with pytest.raises(ValueError):
        create_repository("not-a-url")


def test_resolve_database_url_precedence(monkeypatch):
    monkeypatch.delenv("PRESSFLOW_DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite://generic.db")
    config = PressflowConfig(database_url="sqlite://configured.db")

    assert resolve_database_url(config=config) == "sqlite://generic.db"
    monkeypatch.setenv("PRESSFLOW_DATABASE_URL", "sqlite://specific.db")
    assert resolve_database_url(config=config) == "sqlite://specific.db"
    assert resolve_database_url("sqlite://explicit.db", config) == "sqlite://explicit.db"

    monkeypatch.delenv("PRESSFLOW_DATABASE_URL")
    monkeypatch.delenv("DATABASE_URL")
    assert resolve_database_url(config=config) == "sqlite://configured.db"
