"""PostgreSQL task repository adapter.

Implements TaskRepositoryPort using PostgreSQL with asyncpg for async access.
Provides ACID guarantees for task state with scalability for production use.
"""

import asyncio
import logging
import uuid
from datetime import UTC, datetime
from typing import Any

import asyncpg

from taskmanager.core.errors import TaskNotFoundError
from taskmanager.core.models import Task

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, description, completed, created_at"


class PostgreSQLTaskRepository:
    """PostgreSQL-backed task repository with connection pooling and async access."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "taskmanager",
        user: str = "taskmanager",
        password: str = "",
        pool_size: int = 10,
    ):
        """Initialize PostgreSQL repository with connection pooling.

        Args:
            host: PostgreSQL server hostname.
            port: PostgreSQL server port.
            database: Database name.
            user: Database user.
            password: Database password.
            pool_size: Number of connections to maintain in the pool.
        """
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self._pool: asyncpg.Pool | None = None
        self._pool_size = pool_size
        self._schema_lock = asyncio.Lock()
        self._schema_initialized = False

    async def _init_pool(self) -> asyncpg.Pool:
        """Initialize the connection pool on first use."""
        if self._pool is None:
            self._pool = await asyncpg.create_pool(
                host=self.host,
                port=self.port,
                database=self.database,
                user=self.user,
                password=self.password,
                min_size=1,
                max_size=self._pool_size,
            )
        return self._pool

    async def close(self) -> None:
        """Close all pooled connections."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def _init_schema(self) -> asyncpg.Pool:
        """Initialize database schema on first use and return the pool.

        Uses dedicated _schema_lock to avoid concurrent CREATE TABLE.
        """
        if self._schema_initialized:
            return await self._init_pool()

        async with self._schema_lock:
            pool = await self._init_pool()
            if self._schema_initialized:
                return pool

            async with pool.acquire() as conn:
                await conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS tasks (
                        id TEXT PRIMARY KEY,
                        title VARCHAR(255) NOT NULL,
                        description VARCHAR(1000),
                        completed BOOLEAN NOT NULL DEFAULT FALSE,
                        created_at TIMESTAMPTZ NOT NULL
                    )
                    """
                )
                await conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)"
                )

            self._schema_initialized = True
            return pool

    async def create(self, task: Task) -> Task:
        """Insert a new task with a generated id and UTC creation time."""
        pool = await self._init_schema()

        # TIMESTAMPTZ keeps microseconds, so the returned value matches reads.
        created = Task(
            id=str(uuid.uuid4()),
            title=task.title,
            description=task.description,
            completed=False,
            created_at=datetime.now(UTC),
        )

        async with pool.acquire() as conn:
            await conn.execute(
                f"INSERT INTO tasks ({_COLUMNS}) VALUES ($1, $2, $3, $4, $5)",
                created.id,
                created.title,
                created.description,
                False,
                created.created_at,
            )

        return created

    async def find_by_id(self, task_id: str) -> Task | None:
        """Look up a task by its ID."""
        pool = await self._init_schema()

        async with pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = $1", task_id
            )
            if row is None:
                return None
            return self._row_to_task(row)

    async def find_all(self) -> list[Task]:
        """Return all tasks, oldest first."""
        pool = await self._init_schema()

        async with pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at, id"
            )
            return [self._row_to_task(row) for row in rows]

    async def update(self, task: Task) -> None:
        """Write the mutable fields of an existing task in a single-row update."""
        pool = await self._init_schema()

        async with pool.acquire() as conn:
            status = await conn.execute(
                "UPDATE tasks SET title = $1, description = $2, completed = $3 WHERE id = $4",
                task.title,
                task.description,
                task.completed,
                task.id,
            )

        # asyncpg returns the command tag, e.g. "UPDATE 1"
        if status.split()[-1] == "0":
            raise TaskNotFoundError(str(task.id))

    def _row_to_task(self, row: Any) -> Task:
        """Convert a database row to a Task object.

        Raises:
            ValueError: If row is malformed or contains invalid data.
        """
        try:
            task_id = row["id"]
            title = row["title"]
            created_at = row["created_at"]

            if not task_id or not title:
                raise ValueError("Missing required fields: id or title")
            if not isinstance(created_at, datetime):
                raise ValueError(f"Invalid created_at: {created_at!r}")

            return Task(
                id=task_id,
                title=title,
                description=row["description"],
                completed=bool(row["completed"]),
                created_at=created_at.astimezone(UTC),
            )

        except Exception as e:
            logger.error(f"Failed to parse database row: {e}", exc_info=True)
            raise ValueError(f"Row parsing failed: {e}") from e
