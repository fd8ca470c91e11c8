"""SQLite task repository adapter.

Implements TaskRepositoryPort using SQLite with aiosqlite for async access.
Provides ACID guarantees for task state with zero operational overhead.
"""

import asyncio
import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from taskmanager.core.errors import TaskNotFoundError
from taskmanager.core.models import Task

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, description, completed, created_at"


class SQLiteTaskRepository:
    """SQLite-backed task repository with connection pooling and async access."""

    def __init__(self, db_path: str, pool_size: int = 5):
        """Initialize SQLite repository with connection pooling.

        Args:
            db_path: Path to SQLite database file.
            pool_size: Number of connections to maintain in the pool.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._pool: list[aiosqlite.Connection] = []
        self._pool_lock = asyncio.Lock()
        self._schema_lock = asyncio.Lock()
        self._pool_size = pool_size
        self._schema_initialized = False
        self._closed = False

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get a connection from the pool or create a new one."""
        async with self._pool_lock:
            if self._pool:
                return self._pool.pop()
        return await aiosqlite.connect(str(self.db_path))

    async def _return_connection(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool, or close it after shutdown."""
        async with self._pool_lock:
            if not self._closed and len(self._pool) < self._pool_size:
                self._pool.append(conn)
                return
        await conn.close()

    async def close(self) -> None:
        """Close all pooled connections.

        Connections checked out while this runs are not touched here; they
        are closed when their operation hands them back. The repository
        stops pooling from this point on.
        """
        async with self._pool_lock:
            self._closed = True
            for conn in self._pool:
                await conn.close()
            self._pool.clear()

    async def _init_schema(self) -> None:
        """Initialize database schema on first use.

        Only runs once per instance. Subsequent calls are no-ops.
        """
        if self._schema_initialized:
            return

        async with self._schema_lock:
            # Check again after acquiring lock to prevent race
            if self._schema_initialized:
                return

            conn = await self._get_connection()
            try:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS tasks (
                        id TEXT PRIMARY KEY,
                        title TEXT NOT NULL,
                        description TEXT,
                        completed INTEGER NOT NULL DEFAULT 0,
                        created_at TEXT NOT NULL
                    )
                    """
                )
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)"
                )
                await conn.commit()
                self._schema_initialized = True
            finally:
                await self._return_connection(conn)

    async def create(self, task: Task) -> Task:
        """Insert a new task with a generated id and UTC creation time."""
        await self._init_schema()

        created = Task(
            id=str(uuid.uuid4()),
            title=task.title,
            description=task.description,
            completed=False,
            created_at=datetime.now(UTC),
        )

        conn = await self._get_connection()
        try:
            await conn.execute(
                f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                (
                    created.id,
                    created.title,
                    created.description,
                    0,
                    self._format_timestamp(created.created_at),
                ),
            )
            await conn.commit()
        finally:
            await self._return_connection(conn)

        return created

    async def find_by_id(self, task_id: str) -> Task | None:
        """Look up a task by its ID."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_task(row)
        finally:
            await self._return_connection(conn)

    async def find_all(self) -> list[Task]:
        """Return all tasks, oldest first."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at, id"
            )
            rows = await cursor.fetchall()
            return [self._row_to_task(row) for row in rows]
        finally:
            await self._return_connection(conn)

    async def update(self, task: Task) -> None:
        """Write the mutable fields of an existing task in a single-row update."""
        await self._init_schema()

        conn = await self._get_connection()
        try:
            cursor = await conn.execute(
                "UPDATE tasks SET title = ?, description = ?, completed = ? WHERE id = ?",
                (task.title, task.description, int(task.completed), task.id),
            )
            await conn.commit()
            if cursor.rowcount == 0:
                raise TaskNotFoundError(str(task.id))
        finally:
            await self._return_connection(conn)

    @staticmethod
    def _format_timestamp(value: datetime) -> str:
        """Serialize a timestamp as ISO-8601 UTC with microseconds."""
        return value.astimezone(UTC).isoformat(timespec="microseconds")

    def _row_to_task(self, row: tuple[Any, ...]) -> Task:
        """Convert a database row to a Task object.

        Raises:
            ValueError: If row is malformed or contains invalid data.
        """
        try:
            if not row or len(row) != 5:
                raise ValueError(
                    f"Invalid row length: expected 5, got {len(row) if row else 0}"
                )

            task_id, title, description, completed, created_at = row

            if not task_id or not title:
                raise ValueError("Missing required fields: id or title")

            if completed not in (0, 1):
                raise ValueError(f"Invalid completed flag: {completed!r}")

            try:
                created_at_dt = datetime.fromisoformat(created_at)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid date format: {e}") from e
            if created_at_dt.tzinfo is None:
                created_at_dt = created_at_dt.replace(tzinfo=UTC)

            return Task(
                id=task_id,
                title=title,
                description=description,
                completed=bool(completed),
                created_at=created_at_dt,
            )

        except Exception as e:
            logger.error(f"Failed to parse database row: {e}")
            raise ValueError(f"Row parsing failed: {e}") from e
