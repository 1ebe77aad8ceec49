"""PostgreSQL implementation of the execution repository."""

from __future__ import annotations

import json
import uuid
from enum import Enum
from typing import Any, Dict, Optional

import asyncpg

from ..contracts import ExecutionStatus, WorkflowExecution
from ..errors import InvalidTransitionError
from .repository import EXECUTION_COLUMNS, ExecutionRepository, check_update_fields

_SELECT = f"SELECT {', '.join(EXECUTION_COLUMNS)} FROM workflow_executions"


def _to_column(name: str, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if name == "result":
        return json.dumps(value, default=str)
    return value


def _to_model(row: asyncpg.Record) -> WorkflowExecution:
    result = row["result"]
    if isinstance(result, str):
        result = json.loads(result)
    return WorkflowExecution(
        id=row["id"],
        workflow_rule_id=row["workflow_rule_id"],
        correlation_id=row["correlation_id"],
        status=row["status"],
        started_at=row["started_at"],
        completed_at=row["completed_at"],
        result=result,
        error_message=row["error_message"],
    )


class PostgresExecutionRepository(ExecutionRepository):
    """Persist execution records using PostgreSQL."""

    def __init__(self, dsn: str):
        self._dsn = dsn
        self._initialized = False

    async def _connect(self) -> asyncpg.Connection:
        conn = await asyncpg.connect(self._dsn)
        if not self._initialized:
            await self._ensure_schema(conn)
            self._initialized = True
        return conn

    async def _ensure_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS workflow_executions (
                id TEXT PRIMARY KEY,
                workflow_rule_id TEXT NOT NULL,
                correlation_id TEXT NOT NULL,
                status TEXT NOT NULL,
                started_at TIMESTAMPTZ NOT NULL,
                completed_at TIMESTAMPTZ,
                result JSONB,
                error_message TEXT
            )
            """
        )

    # ------------------------------------------------------------------
    async def insert_execution(self, fields: Dict[str, Any]) -> WorkflowExecution:
        data = dict(fields)
        data.setdefault("id", str(uuid.uuid4()))
        execution = WorkflowExecution.model_validate(data)
        row = execution.model_dump()
        placeholders = ", ".join(f"${i}" for i in range(1, len(EXECUTION_COLUMNS) + 1))
        conn = await self._connect()
        try:
            await conn.execute(
                f"INSERT INTO workflow_executions ({', '.join(EXECUTION_COLUMNS)}) VALUES ({placeholders})",
                *(_to_column(name, row[name]) for name in EXECUTION_COLUMNS),
            )
        finally:
            await conn.close()
        return execution

    async def update_execution(self, execution_id: str, fields: Dict[str, Any]) -> None:
        check_update_fields(fields)
        names = list(fields)
        assignments = ", ".join(f"{name} = ${i}" for i, name in enumerate(names, start=1))
        conn = await self._connect()
        try:
            status = await conn.execute(
                f"UPDATE workflow_executions SET {assignments} "
                f"WHERE id = ${len(names) + 1} AND status = ${len(names) + 2}",
                *(_to_column(name, fields[name]) for name in names),
                execution_id,
                ExecutionStatus.RUNNING.value,
            )
        finally:
            await conn.close()
        # asyncpg returns the command tag, e.g. "UPDATE 1"
        if status.split()[-1] == "0":
            raise InvalidTransitionError(
                f"Execution {execution_id} not found or not running"
            )

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        conn = await self._connect()
        try:
            row = await conn.fetchrow(f"{_SELECT} WHERE id = $1", execution_id)
        finally:
            await conn.close()
        return _to_model(row) if row else None

    async def list_executions(
        self, workflow_rule_id: Optional[str] = None
    ) -> list[WorkflowExecution]:
        conn = await self._connect()
        try:
            if workflow_rule_id is None:
                rows = await conn.fetch(f"{_SELECT} ORDER BY started_at")
            else:
                rows = await conn.fetch(
                    f"{_SELECT} WHERE workflow_rule_id = $1 ORDER BY started_at",
                    workflow_rule_id,
                )
        finally:
            await conn.close()
        return [_to_model(r) for r in rows]
