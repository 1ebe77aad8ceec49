"""SQLite implementation of the execution repository."""

from __future__ import annotations

import asyncio
import json
import sqlite3
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from ..contracts import ExecutionStatus, WorkflowExecution
from ..errors import InvalidTransitionError
from .repository import EXECUTION_COLUMNS, ExecutionRepository, check_update_fields

_SELECT = f"SELECT {', '.join(EXECUTION_COLUMNS)} FROM workflow_executions"


def _to_column(name: str, value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if name == "result":
        return json.dumps(value, default=str)
    return value


class SQLiteExecutionRepository(ExecutionRepository):
    """Persist execution records using SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS workflow_executions (
                id TEXT PRIMARY KEY,
                workflow_rule_id TEXT NOT NULL,
                correlation_id TEXT NOT NULL,
                status TEXT NOT NULL,
                started_at TEXT NOT NULL,
                completed_at TEXT,
                result TEXT,
                error_message TEXT
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()
        return cur.rowcount

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    @staticmethod
    def _to_model(row: sqlite3.Row) -> WorkflowExecution:
        return WorkflowExecution(
            id=row["id"],
            workflow_rule_id=row["workflow_rule_id"],
            correlation_id=row["correlation_id"],
            status=row["status"],
            started_at=datetime.fromisoformat(row["started_at"]),
            completed_at=datetime.fromisoformat(row["completed_at"]) if row["completed_at"] else None,
            result=json.loads(row["result"]) if row["result"] else None,
            error_message=row["error_message"],
        )

    # ------------------------------------------------------------------
    # Repository API
    async def insert_execution(self, fields: Dict[str, Any]) -> WorkflowExecution:
        data = dict(fields)
        data.setdefault("id", str(uuid.uuid4()))
        execution = WorkflowExecution.model_validate(data)
        row = execution.model_dump()
        await asyncio.to_thread(
            self._execute,
            f"INSERT INTO workflow_executions ({', '.join(EXECUTION_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in EXECUTION_COLUMNS)})",
            *(_to_column(name, row[name]) for name in EXECUTION_COLUMNS),
        )
        return execution

    async def update_execution(self, execution_id: str, fields: Dict[str, Any]) -> None:
        check_update_fields(fields)
        assignments = ", ".join(f"{name} = ?" for name in fields)
        updated = await asyncio.to_thread(
            self._execute,
            f"UPDATE workflow_executions SET {assignments} WHERE id = ? AND status = ?",
            *(_to_column(name, value) for name, value in fields.items()),
            execution_id,
            ExecutionStatus.RUNNING.value,
        )
        if updated == 0:
            raise InvalidTransitionError(
                f"Execution {execution_id} not found or not running"
            )

    async def get_execution(self, execution_id: str) -> WorkflowExecution | None:
        row = await asyncio.to_thread(
            self._fetchone, f"{_SELECT} WHERE id = ?", execution_id
        )
        return self._to_model(row) if row else None

    async def list_executions(
        self, workflow_rule_id: Optional[str] = None
    ) -> list[WorkflowExecution]:
        if workflow_rule_id is None:
            rows = await asyncio.to_thread(
                self._fetchall, f"{_SELECT} ORDER BY started_at"
            )
        else:
            rows = await asyncio.to_thread(
                self._fetchall,
                f"{_SELECT} WHERE workflow_rule_id = ? ORDER BY started_at",
                workflow_rule_id,
            )
        return [self._to_model(r) for r in rows]
