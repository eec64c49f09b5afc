"""
Permanent commit ledger (Postgres).

Every cross-locale commit is recorded here, separately from version
history: versions get sparser as they age and cannot always show the
version that preceded a commit, while the ledger keeps every entry forever.
Records are insert-only; no update or delete operations are exposed.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from uuid import uuid4

import asyncpg

from locale_workflow.exceptions.ledger import LedgerIndexError
from locale_workflow.models.commit import CommitRecord

logger = logging.getLogger(__name__)

LEDGER_TABLE = "workflow_commits"

# Created strictly in this order; the first failure stops the rest.
LEDGER_INDEXES: Tuple[Tuple[str, str], ...] = (
    ("idx_workflow_commits_created_at", '"createdAt" DESC'),
    ("idx_workflow_commits_from_id", '"fromId"'),
    ("idx_workflow_commits_to_id", '"toId"'),
    ("idx_workflow_commits_workflow_guid", '"workflowGuid"'),
)

_KNOWN_KEYS = frozenset(
    {"_id", "commit_id", "createdAt", "created_at", "fromId", "from_id", "toId", "to_id",
     "workflowGuid", "workflow_guid", "fromLocale", "from_locale", "toLocale", "to_locale",
     "userId", "user_id", "payload"}
)


def _coerce_record(record: Union[CommitRecord, Mapping[str, Any]]) -> CommitRecord:
    if isinstance(record, CommitRecord):
        return record
    data = dict(record)
    extra = {key: value for key, value in data.items() if key not in _KNOWN_KEYS}
    if extra:
        data["payload"] = {**(data.get("payload") or {}), **extra}
    return CommitRecord.model_validate(data)


class CommitLedger:
    def __init__(
        self,
        *,
        dsn: Optional[str] = None,
        schema: str = "workflow",
        pool_min: int = 1,
        pool_max: int = 5,
        pool: Optional[asyncpg.Pool] = None,
    ):
        self._dsn = dsn
        self._schema = schema
        self._pool_min = pool_min
        self._pool_max = pool_max
        self._pool = pool
        self._ready = False
        self._open_lock = asyncio.Lock()

    @property
    def table(self) -> str:
        return f"{self._schema}.{LEDGER_TABLE}"

    @property
    def is_open(self) -> bool:
        return self._ready

    async def open(self) -> None:
        """Connect, create the ledger table and its indexes. Safe to call repeatedly."""
        async with self._open_lock:
            if self._ready:
                return
            if self._pool is None:
                if not self._dsn:
                    raise ValueError("dsn is required when no pool is supplied")
                self._pool = await asyncpg.create_pool(
                    self._dsn,
                    min_size=self._pool_min,
                    max_size=self._pool_max,
                )
            await self.ensure_schema()
            await self.ensure_indexes()
            self._ready = True
            logger.info(f"Commit ledger ready at {self.table}")

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
        self._ready = False

    async def ensure_schema(self) -> None:
        async with self._pool.acquire() as conn:
            await conn.execute(f"CREATE SCHEMA IF NOT EXISTS {self._schema}")
            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    "_id" TEXT PRIMARY KEY,
                    "createdAt" TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                    "fromId" TEXT NOT NULL,
                    "toId" TEXT NOT NULL,
                    "workflowGuid" TEXT NOT NULL,
                    "fromLocale" TEXT,
                    "toLocale" TEXT,
                    "userId" TEXT,
                    payload JSONB NOT NULL DEFAULT '{{}}'::jsonb
                )
                """
            )

    async def ensure_indexes(self) -> None:
        """
        Create the ledger indexes one at a time, in order.

        Raises:
            LedgerIndexError: on the first index that cannot be created;
                later indexes are not attempted
        """
        async with self._pool.acquire() as conn:
            for index_name, columns in LEDGER_INDEXES:
                try:
                    await conn.execute(
                        f"CREATE INDEX IF NOT EXISTS {index_name} ON {self.table}({columns})"
                    )
                except Exception as e:
                    logger.error(f"Failed to create commit ledger index {index_name}: {e}")
                    raise LedgerIndexError(index_name, str(e)) from e

    async def append(self, record: Union[CommitRecord, Mapping[str, Any]]) -> str:
        """Insert one commit record and return its id."""
        if not self._ready:
            await self.open()

        entry = _coerce_record(record)
        commit_id = entry.commit_id or str(uuid4())
        created_at = entry.created_at or datetime.now(timezone.utc)
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        async with self._pool.acquire() as conn:
            await conn.execute(
                f"""
                INSERT INTO {self.table} (
                    "_id", "createdAt", "fromId", "toId", "workflowGuid",
                    "fromLocale", "toLocale", "userId", payload
                )
                VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9::jsonb)
                """,
                commit_id,
                created_at,
                entry.from_id,
                entry.to_id,
                entry.workflow_guid,
                entry.from_locale,
                entry.to_locale,
                entry.user_id,
                json.dumps(entry.payload or {}, ensure_ascii=False, default=str),
            )
        return commit_id

    async def list_commits(
        self,
        *,
        workflow_guid: Optional[str] = None,
        from_id: Optional[str] = None,
        to_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[CommitRecord]:
        """Commits matching every given filter, newest first."""
        if not self._ready:
            await self.open()

        clauses: List[str] = []
        params: List[Any] = []

        def _add(condition: str, value: Any) -> None:
            params.append(value)
            clauses.append(condition.replace("$X", f"${len(params)}"))

        if workflow_guid:
            _add('"workflowGuid" = $X', workflow_guid)
        if from_id:
            _add('"fromId" = $X', from_id)
        if to_id:
            _add('"toId" = $X', to_id)

        where = " WHERE " + " AND ".join(clauses) if clauses else ""
        limit = max(1, min(int(limit), 1000))
        offset = max(0, int(offset))

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                SELECT "_id", "createdAt", "fromId", "toId", "workflowGuid",
                       "fromLocale", "toLocale", "userId", payload
                FROM {self.table}
                {where}
                ORDER BY "createdAt" DESC
                LIMIT {limit} OFFSET {offset}
                """,
                *params,
            )

        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: Mapping[str, Any]) -> CommitRecord:
        payload = row["payload"]
        if isinstance(payload, str):
            payload = json.loads(payload)
        data: Dict[str, Any] = {
            "_id": str(row["_id"]),
            "createdAt": row["createdAt"],
            "fromId": row["fromId"],
            "toId": row["toId"],
            "workflowGuid": row["workflowGuid"],
            "fromLocale": row["fromLocale"],
            "toLocale": row["toLocale"],
            "userId": row["userId"],
            "payload": dict(payload or {}),
        }
        return CommitRecord.model_validate(data)


def create_commit_ledger(settings: Any) -> CommitLedger:
    database = settings.database
    return CommitLedger(
        dsn=database.postgres_url,
        schema=database.ledger_schema,
        pool_min=database.ledger_pool_min,
        pool_max=database.ledger_pool_max,
    )
