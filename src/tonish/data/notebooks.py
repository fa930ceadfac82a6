"""Typed SQLite read/write abstraction for notebooks and their pages.

Notebooks are always returned with their pages attached. Deleting a
notebook deletes its pages first.
"""

from typing import Any

from tonish.data.database import TonishDatabase, encode_column
from tonish.logging import get_logger
from tonish.models import Notebook, Page, from_iso, utc_now

logger = get_logger(__name__)

_NOTEBOOK_COLUMNS = "id, name, tags, is_pinned, created_at, updated_at, user_id"
_PAGE_COLUMNS = "id, notebook_id, title, content, tags, is_pinned, created_at, updated_at"

NOTEBOOK_FIELDS = frozenset({"name", "tags", "is_pinned", "user_id"})
PAGE_FIELDS = frozenset({"notebook_id", "title", "content", "tags", "is_pinned"})


def _row_to_notebook(row: tuple, pages: list[Page] | None = None) -> Notebook:
    return Notebook(
        id=row[0],
        name=row[1],
        tags=row[2],
        is_pinned=bool(row[3]),
        created_at=from_iso(row[4]),
        updated_at=from_iso(row[5]),
        user_id=row[6],
        pages=pages or [],
    )


def _row_to_page(row: tuple) -> Page:
    return Page(
        id=row[0],
        notebook_id=row[1],
        title=row[2],
        content=row[3],
        tags=row[4],
        is_pinned=bool(row[5]),
        created_at=from_iso(row[6]),
        updated_at=from_iso(row[7]),
    )


def _pick(fields: dict[str, Any], allowed: frozenset[str]) -> dict[str, Any]:
    return {k: encode_column(v) for k, v in fields.items() if k in allowed and v is not None}


class NotebookStore:
    """Async SQLite store for notebooks and pages."""

    def __init__(self, database: TonishDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Notebooks
    # ──────────────────────────────────────────────

    async def list_all(self) -> list[Notebook]:
        db = self._database.db
        cursor = await db.execute(
            f"SELECT {_NOTEBOOK_COLUMNS} FROM notebooks ORDER BY id ASC"
        )
        notebook_rows = await cursor.fetchall()

        cursor = await db.execute(f"SELECT {_PAGE_COLUMNS} FROM pages ORDER BY id ASC")
        pages_by_notebook: dict[int, list[Page]] = {}
        for row in await cursor.fetchall():
            page = _row_to_page(row)
            pages_by_notebook.setdefault(page.notebook_id, []).append(page)

        return [
            _row_to_notebook(row, pages_by_notebook.get(row[0], []))
            for row in notebook_rows
        ]

    async def get(self, notebook_id: int) -> Notebook | None:
        cursor = await self._database.db.execute(
            f"SELECT {_NOTEBOOK_COLUMNS} FROM notebooks WHERE id = ?", (notebook_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return _row_to_notebook(row, await self._pages_of(notebook_id))

    async def create(self, fields: dict[str, Any]) -> Notebook:
        values = _pick(fields, NOTEBOOK_FIELDS)
        now = encode_column(utc_now())
        values["created_at"] = now
        values["updated_at"] = now
        notebook_id = await self._insert("notebooks", values)

        notebook = await self.get(notebook_id)
        assert notebook is not None
        logger.debug("notebook_created", notebook_id=notebook_id)
        return notebook

    async def update(self, notebook_id: int, fields: dict[str, Any]) -> Notebook | None:
        if await self.get(notebook_id) is None:
            return None
        await self._update("notebooks", notebook_id, _pick(fields, NOTEBOOK_FIELDS))
        return await self.get(notebook_id)

    async def delete(self, notebook_id: int) -> Notebook | None:
        """Delete a notebook and all of its pages. Returns what was deleted."""
        notebook = await self.get(notebook_id)
        if notebook is None:
            return None
        db = self._database.db
        await db.execute("DELETE FROM pages WHERE notebook_id = ?", (notebook_id,))
        await db.execute("DELETE FROM notebooks WHERE id = ?", (notebook_id,))
        await db.commit()
        logger.debug("notebook_deleted", notebook_id=notebook_id, pages=len(notebook.pages))
        return notebook

    # ──────────────────────────────────────────────
    # Pages
    # ──────────────────────────────────────────────

    async def get_page(self, page_id: int) -> Page | None:
        cursor = await self._database.db.execute(
            f"SELECT {_PAGE_COLUMNS} FROM pages WHERE id = ?", (page_id,)
        )
        row = await cursor.fetchone()
        return _row_to_page(row) if row else None

    async def create_page(self, fields: dict[str, Any]) -> Page:
        values = _pick(fields, PAGE_FIELDS)
        now = encode_column(utc_now())
        values["created_at"] = now
        values["updated_at"] = now
        page_id = await self._insert("pages", values)

        page = await self.get_page(page_id)
        assert page is not None
        return page

    async def update_page(self, page_id: int, fields: dict[str, Any]) -> Page | None:
        if await self.get_page(page_id) is None:
            return None
        await self._update("pages", page_id, _pick(fields, PAGE_FIELDS))
        return await self.get_page(page_id)

    async def delete_page(self, page_id: int) -> Page | None:
        page = await self.get_page(page_id)
        if page is None:
            return None
        await self._database.db.execute("DELETE FROM pages WHERE id = ?", (page_id,))
        await self._database.db.commit()
        return page

    async def search_pages(self, query: str = "") -> list[Page]:
        """Pages whose title or content contains query; every page when empty."""
        if query:
            pattern = f"%{query}%"
            cursor = await self._database.db.execute(
                f"SELECT {_PAGE_COLUMNS} FROM pages "
                "WHERE title LIKE ? OR content LIKE ? ORDER BY id ASC",
                (pattern, pattern),
            )
        else:
            cursor = await self._database.db.execute(
                f"SELECT {_PAGE_COLUMNS} FROM pages ORDER BY id ASC"
            )
        rows = await cursor.fetchall()
        return [_row_to_page(row) for row in rows]

    # ──────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────

    async def _pages_of(self, notebook_id: int) -> list[Page]:
        cursor = await self._database.db.execute(
            f"SELECT {_PAGE_COLUMNS} FROM pages WHERE notebook_id = ? ORDER BY id ASC",
            (notebook_id,),
        )
        return [_row_to_page(row) for row in await cursor.fetchall()]

    async def _insert(self, table: str, values: dict[str, Any]) -> int:
        columns = ", ".join(values)
        placeholders = ", ".join("?" for _ in values)
        cursor = await self._database.db.execute(
            f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
            list(values.values()),
        )
        await self._database.db.commit()
        return cursor.lastrowid

    async def _update(self, table: str, row_id: int, values: dict[str, Any]) -> None:
        values = dict(values)
        values["updated_at"] = encode_column(utc_now())
        assignments = ", ".join(f"{column} = ?" for column in values)
        await self._database.db.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?",
            [*values.values(), row_id],
        )
        await self._database.db.commit()
