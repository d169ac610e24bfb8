"""Session log storage adapters.

The analytics core only ever calls ``list()``; ``append`` and
``delete_by_id`` exist for the logging flow that owns the log. Every IO
failure surfaces as SessionStoreError and nothing is retried here.

Records that cannot be parsed (no id, no usable timestamp) are logged and
skipped rather than failing the whole read.

Postgres layout:

    CREATE TABLE workout_sessions (
        id          TEXT NOT NULL,
        user_id     TEXT NOT NULL,
        started_at  TIMESTAMPTZ NOT NULL,
        type_label  TEXT NOT NULL DEFAULT '',
        exercises   JSONB NOT NULL DEFAULT '[]',
        PRIMARY KEY (user_id, id)
    );
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Protocol

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Json
from pydantic import ValidationError

from .config import Config
from .models import WorkoutSession

logger = logging.getLogger(__name__)


class SessionStoreError(Exception):
    """The backing store could not be read or written."""


class SessionStore(Protocol):
    async def list(self) -> Sequence[WorkoutSession]: ...

    async def append(self, session: WorkoutSession) -> None: ...

    async def delete_by_id(self, session_id: str) -> bool: ...


def parse_records(records: Iterable[Any], *, source: str) -> list[WorkoutSession]:
    sessions: list[WorkoutSession] = []
    skipped = 0
    for record in records:
        if not isinstance(record, dict):
            skipped += 1
            continue
        try:
            sessions.append(WorkoutSession.from_record(record))
        except ValidationError as exc:
            skipped += 1
            logger.warning(
                "Skipping malformed session record id=%s from %s: %s",
                record.get("id", "?"),
                source,
                exc.errors()[0]["msg"] if exc.errors() else exc,
            )
    if skipped:
        logger.warning("Skipped %d unusable record(s) from %s", skipped, source)
    return sessions


class JsonFileSessionStore:
    """Whole log kept as one JSON array, like the app's on-device storage."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    async def list(self) -> Sequence[WorkoutSession]:
        records = await asyncio.to_thread(self._read)
        return parse_records(records, source=str(self.path))

    async def append(self, session: WorkoutSession) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._append_sync, session)
        logger.info("Appended session %s to %s", session.id, self.path)

    async def delete_by_id(self, session_id: str) -> bool:
        async with self._write_lock:
            removed = await asyncio.to_thread(self._delete_sync, str(session_id))
        if removed:
            logger.info("Deleted session %s from %s", session_id, self.path)
        return removed

    def _read(self) -> list[Any]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise SessionStoreError(f"Cannot read {self.path}: {exc}") from exc
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SessionStoreError(f"{self.path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise SessionStoreError(f"{self.path} must contain a JSON array of sessions")
        return data

    def _write(self, records: list[Any]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(records, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise SessionStoreError(f"Cannot write {self.path}: {exc}") from exc

    def _append_sync(self, session: WorkoutSession) -> None:
        records = self._read()
        records.append(session.to_record())
        self._write(records)

    def _delete_sync(self, session_id: str) -> bool:
        records = self._read()
        kept = [
            record
            for record in records
            if not (isinstance(record, dict) and str(record.get("id")) == session_id)
        ]
        if len(kept) == len(records):
            return False
        self._write(kept)
        return True


def _row_to_record(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "timestamp": row["started_at"],
        "type_label": row.get("type_label") or "",
        "exercises": row.get("exercises") or [],
    }


class PostgresSessionStore:
    """Per-user session rows in Postgres (the remote document store)."""

    def __init__(self, database_url: str, user_id: str) -> None:
        self.database_url = database_url
        self.user_id = user_id

    async def list(self) -> Sequence[WorkoutSession]:
        try:
            async with await psycopg.AsyncConnection.connect(self.database_url) as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        """
                        SELECT id, started_at, type_label, exercises
                        FROM workout_sessions
                        WHERE user_id = %s
                        ORDER BY started_at ASC, id ASC
                        """,
                        (self.user_id,),
                    )
                    rows = await cur.fetchall()
        except psycopg.Error as exc:
            raise SessionStoreError(f"Failed to list sessions for user={self.user_id}: {exc}") from exc
        return parse_records(
            (_row_to_record(row) for row in rows), source="workout_sessions"
        )

    async def append(self, session: WorkoutSession) -> None:
        record = session.to_record()
        try:
            async with await psycopg.AsyncConnection.connect(self.database_url) as conn:
                await conn.execute(
                    """
                    INSERT INTO workout_sessions (id, user_id, started_at, type_label, exercises)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (
                        session.id,
                        self.user_id,
                        session.timestamp,
                        session.type_label,
                        Json(record["exercises"]),
                    ),
                )
                await conn.commit()
        except psycopg.Error as exc:
            raise SessionStoreError(f"Failed to append session {session.id}: {exc}") from exc
        logger.info("Appended session %s for user=%s", session.id, self.user_id)

    async def delete_by_id(self, session_id: str) -> bool:
        try:
            async with await psycopg.AsyncConnection.connect(self.database_url) as conn:
                async with conn.cursor() as cur:
                    await cur.execute(
                        "DELETE FROM workout_sessions WHERE user_id = %s AND id = %s",
                        (self.user_id, str(session_id)),
                    )
                    removed = cur.rowcount > 0
                await conn.commit()
        except psycopg.Error as exc:
            raise SessionStoreError(f"Failed to delete session {session_id}: {exc}") from exc
        if removed:
            logger.info("Deleted session %s for user=%s", session_id, self.user_id)
        return removed


def store_from_config(config: Config) -> SessionStore:
    if config.database_url and config.user_id:
        return PostgresSessionStore(config.database_url, config.user_id)
    return JsonFileSessionStore(config.store_path)
