"""Typed SQLite read/write abstraction for tasks.

Deletion is soft by default: delete() stamps deleted_at and the row drops
out of every normal query, but stays visible in the archived view and can
be restored. delete_permanently() removes the row.
"""

from typing import Any

from tonish.data.database import TonishDatabase, encode_column
from tonish.logging import get_logger
from tonish.models import Task, from_iso, utc_now

logger = get_logger(__name__)

_TASK_COLUMNS = (
    "id, title, description, priority, status, tags, due_date, is_quick_task, "
    "quadrant, task_type, is_archived, completed_at, deleted_at, created_at, "
    "updated_at, user_id"
)

WRITABLE_FIELDS = frozenset(
    {
        "title",
        "description",
        "priority",
        "status",
        "tags",
        "due_date",
        "is_quick_task",
        "quadrant",
        "task_type",
        "is_archived",
        "completed_at",
        "user_id",
    }
)


def _row_to_task(row: tuple) -> Task:
    return Task(
        id=row[0],
        title=row[1],
        description=row[2],
        priority=row[3],
        status=row[4],
        tags=row[5],
        due_date=from_iso(row[6]),
        is_quick_task=bool(row[7]),
        quadrant=row[8],
        task_type=row[9],
        is_archived=bool(row[10]),
        completed_at=from_iso(row[11]),
        deleted_at=from_iso(row[12]),
        created_at=from_iso(row[13]),
        updated_at=from_iso(row[14]),
        user_id=row[15],
    )


def _writable(fields: dict[str, Any]) -> dict[str, Any]:
    """Keep only known columns; None for a NOT NULL text column is dropped."""
    nullable = {"due_date", "completed_at"}
    return {
        k: encode_column(v)
        for k, v in fields.items()
        if k in WRITABLE_FIELDS and (v is not None or k in nullable)
    }


class TaskStore:
    """Async SQLite store for tasks."""

    def __init__(self, database: TonishDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Read methods
    # ──────────────────────────────────────────────

    async def get(self, task_id: int, include_deleted: bool = False) -> Task | None:
        query = f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?"
        if not include_deleted:
            query += " AND deleted_at IS NULL"
        cursor = await self._database.db.execute(query, (task_id,))
        row = await cursor.fetchone()
        return _row_to_task(row) if row else None

    async def list_active(
        self,
        status: str | None = None,
        quadrant: str | None = None,
    ) -> list[Task]:
        """Tasks that are neither archived nor deleted, optionally filtered."""
        conditions = ["deleted_at IS NULL", "is_archived = 0"]
        params: list = []

        if status:
            conditions.append("status = ?")
            params.append(status)
        if quadrant is not None:
            conditions.append("quadrant = ?")
            params.append(quadrant)

        where = " AND ".join(conditions)
        cursor = await self._database.db.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks WHERE {where} ORDER BY id ASC",
            params,
        )
        rows = await cursor.fetchall()
        return [_row_to_task(row) for row in rows]

    async def list_archived(self) -> list[Task]:
        """Archived, completed or soft-deleted tasks, most recently touched first."""
        cursor = await self._database.db.execute(
            f"SELECT {_TASK_COLUMNS} FROM tasks "
            "WHERE is_archived = 1 OR completed_at IS NOT NULL OR deleted_at IS NOT NULL "
            "ORDER BY COALESCE(deleted_at, completed_at, updated_at) DESC"
        )
        rows = await cursor.fetchall()
        return [_row_to_task(row) for row in rows]

    # ──────────────────────────────────────────────
    # Write methods
    # ──────────────────────────────────────────────

    async def create(self, fields: dict[str, Any]) -> Task:
        """Insert a task. Omitted fields take their column defaults."""
        values = _writable(fields)
        now = encode_column(utc_now())
        values["created_at"] = now
        values["updated_at"] = now

        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        cursor = await self._database.db.execute(
            f"INSERT INTO tasks ({columns}) VALUES ({placeholders})",
            list(values.values()),
        )
        await self._database.db.commit()

        task = await self.get(cursor.lastrowid)
        assert task is not None
        logger.debug("task_created", task_id=task.id, user_id=task.user_id)
        return task

    async def update(self, task_id: int, fields: dict[str, Any]) -> Task | None:
        """Overlay the supplied fields onto a live task. None if it does not exist."""
        if await self.get(task_id) is None:
            return None
        await self._set(task_id, _writable(fields))
        return await self.get(task_id)

    async def archive(self, task_id: int) -> Task | None:
        if await self.get(task_id) is None:
            return None
        await self._set(task_id, {"is_archived": 1})
        return await self.get(task_id)

    async def restore(self, task_id: int) -> Task | None:
        """Bring back an archived, completed or soft-deleted task.

        A completed task comes back as "todo" with its completion time cleared.
        """
        task = await self.get(task_id, include_deleted=True)
        if task is None:
            return None
        values: dict[str, Any] = {"is_archived": 0, "deleted_at": None}
        if task.completed_at is not None:
            values["completed_at"] = None
            values["status"] = "todo"
        await self._set(task_id, values)
        return await self.get(task_id)

    async def delete(self, task_id: int) -> Task | None:
        """Soft-delete a live task. Returns it with deleted_at set, or None."""
        if await self.get(task_id) is None:
            return None
        await self._set(task_id, {"deleted_at": encode_column(utc_now())})
        return await self.get(task_id, include_deleted=True)

    async def delete_permanently(self, task_id: int) -> Task | None:
        """Remove the row outright, deleted or not. Returns the removed task."""
        task = await self.get(task_id, include_deleted=True)
        if task is None:
            return None
        await self._database.db.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        await self._database.db.commit()
        logger.debug("task_purged", task_id=task_id)
        return task

    async def _set(self, task_id: int, values: dict[str, Any]) -> None:
        values = dict(values)
        values["updated_at"] = encode_column(utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        await self._database.db.execute(
            f"UPDATE tasks SET {assignments} WHERE id = ?",
            [*values.values(), task_id],
        )
        await self._database.db.commit()
