from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, List, Optional

import pytest

from locale_workflow.exceptions import LedgerIndexError
from locale_workflow.models.commit import CommitRecord
from locale_workflow.services import commit_ledger as commit_ledger_module
from locale_workflow.services.commit_ledger import LEDGER_INDEXES, CommitLedger


class _DummyConnection:
    def __init__(self, pool: "_DummyPool") -> None:
        self._pool = pool

    async def execute(self, query: str, *args: Any) -> str:
        self._pool.statements.append((" ".join(query.split()), args))
        if self._pool.fail_on and self._pool.fail_on in query:
            raise RuntimeError("index build failed")
        return "OK"

    async def fetch(self, query: str, *args: Any) -> List[dict]:
        self._pool.statements.append((" ".join(query.split()), args))
        return self._pool.rows


class _DummyAcquire:
    def __init__(self, conn: _DummyConnection) -> None:
        self._conn = conn

    async def __aenter__(self) -> _DummyConnection:
        return self._conn

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class _DummyPool:
    def __init__(self, fail_on: Optional[str] = None, rows: Optional[List[dict]] = None) -> None:
        self.fail_on = fail_on
        self.rows = rows or []
        self.statements: List[tuple] = []
        self.closed = False

    def acquire(self) -> _DummyAcquire:
        return _DummyAcquire(_DummyConnection(self))

    async def close(self) -> None:
        self.closed = True

    def index_statements(self) -> List[str]:
        return [sql for sql, _ in self.statements if sql.startswith("CREATE INDEX")]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_open_creates_indexes_in_order() -> None:
    pool = _DummyPool()
    ledger = CommitLedger(pool=pool)

    await ledger.open()

    created = pool.index_statements()
    assert [name for name, _ in LEDGER_INDEXES] == [
        "idx_workflow_commits_created_at",
        "idx_workflow_commits_from_id",
        "idx_workflow_commits_to_id",
        "idx_workflow_commits_workflow_guid",
    ]
    assert len(created) == 4
    assert '("createdAt" DESC)' in created[0]
    assert '("fromId")' in created[1]
    assert '("toId")' in created[2]
    assert '("workflowGuid")' in created[3]
    assert all("IF NOT EXISTS" in sql for sql in created)
    assert ledger.is_open


@pytest.mark.unit
@pytest.mark.asyncio
async def test_index_failure_stops_later_indexes() -> None:
    pool = _DummyPool(fail_on="idx_workflow_commits_from_id")
    ledger = CommitLedger(pool=pool)

    with pytest.raises(LedgerIndexError) as exc_info:
        await ledger.open()

    created = pool.index_statements()
    assert len(created) == 2
    assert "idx_workflow_commits_to_id" not in " ".join(created)
    assert exc_info.value.details["index"] == "idx_workflow_commits_from_id"
    assert not ledger.is_open


@pytest.mark.unit
@pytest.mark.asyncio
async def test_open_is_idempotent_under_concurrency() -> None:
    pool = _DummyPool()
    ledger = CommitLedger(pool=pool)

    await asyncio.gather(*[ledger.open() for _ in range(5)])

    assert len(pool.index_statements()) == 4


@pytest.mark.unit
@pytest.mark.asyncio
async def test_open_without_dsn_or_pool_fails() -> None:
    with pytest.raises(ValueError):
        await CommitLedger().open()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_open_creates_pool_from_dsn(monkeypatch: pytest.MonkeyPatch) -> None:
    pool = _DummyPool()
    calls = []

    async def _create_pool(dsn, **kwargs):
        calls.append((dsn, kwargs))
        return pool

    monkeypatch.setattr(commit_ledger_module.asyncpg, "create_pool", _create_pool)
    ledger = CommitLedger(dsn="postgresql://u:p@db:5432/workflow", pool_max=3)

    await ledger.open()

    assert calls == [("postgresql://u:p@db:5432/workflow", {"min_size": 1, "max_size": 3})]
    await ledger.close()
    assert pool.closed is True
    assert not ledger.is_open


@pytest.mark.unit
@pytest.mark.asyncio
async def test_append_inserts_record() -> None:
    pool = _DummyPool()
    ledger = CommitLedger(pool=pool)
    created_at = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    commit_id = await ledger.append(
        {
            "createdAt": created_at,
            "fromId": "doc-draft",
            "toId": "doc-live",
            "workflowGuid": "guid-1",
            "fromLocale": "en-draft",
            "toLocale": "en",
            "patch": [{"op": "replace"}],
        }
    )

    sql, args = pool.statements[-1]
    assert sql.startswith("INSERT INTO workflow.workflow_commits")
    assert args[0] == commit_id
    assert args[1] == created_at
    assert args[2:8] == ("doc-draft", "doc-live", "guid-1", "en-draft", "en", None)
    assert json.loads(args[8]) == {"patch": [{"op": "replace"}]}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_append_keeps_caller_supplied_non_uuid_id() -> None:
    pool = _DummyPool()
    ledger = CommitLedger(pool=pool)

    commit_id = await ledger.append({"_id": "ck1abc", "fromId": "a", "toId": "b", "workflowGuid": "g"})

    _, args = pool.statements[-1]
    assert commit_id == "ck1abc"
    assert args[0] == "ck1abc"
    assert '"_id" TEXT PRIMARY KEY' in " ".join(sql for sql, _ in pool.statements)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_append_defaults_created_at_to_utc_now() -> None:
    pool = _DummyPool()
    ledger = CommitLedger(pool=pool)

    await ledger.append(CommitRecord(from_id="a", to_id="b", workflow_guid="g"))

    _, args = pool.statements[-1]
    assert args[1].tzinfo is not None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_list_commits_filters_and_maps_rows() -> None:
    created_at = datetime(2024, 5, 1, tzinfo=timezone.utc)
    pool = _DummyPool(
        rows=[
            {
                "_id": "0b8a4f4e-6f0c-4c1e-9d76-3a8f0f7e2b11",
                "createdAt": created_at,
                "fromId": "a",
                "toId": "b",
                "workflowGuid": "g",
                "fromLocale": "en-draft",
                "toLocale": "en",
                "userId": "u1",
                "payload": '{"note": "first"}',
            }
        ]
    )
    ledger = CommitLedger(pool=pool)

    records = await ledger.list_commits(workflow_guid="g", to_id="b", limit=5000)

    sql, args = pool.statements[-1]
    assert '"workflowGuid" = $1' in sql
    assert '"toId" = $2' in sql
    assert "LIMIT 1000" in sql
    assert args == ("g", "b")
    assert len(records) == 1
    assert records[0].workflow_guid == "g"
    assert records[0].created_at == created_at
    assert records[0].payload == {"note": "first"}
    assert records[0].model_dump(by_alias=True)["fromId"] == "a"
