"""Typed SQLite read/write abstraction for user accounts."""

import sqlite3

from tonish.data.database import TonishDatabase, encode_column
from tonish.exceptions import ConflictError
from tonish.logging import get_logger
from tonish.models import User, from_iso, utc_now

logger = get_logger(__name__)

_USER_COLUMNS = "id, email, password_hash, name, created_at, updated_at"


def _row_to_user(row: tuple) -> User:
    return User(
        id=row[0],
        email=row[1],
        password_hash=row[2],
        name=row[3],
        created_at=from_iso(row[4]),
        updated_at=from_iso(row[5]),
    )


class UserStore:
    """Async SQLite store for user accounts."""

    def __init__(self, database: TonishDatabase) -> None:
        self._database = database

    async def get(self, user_id: int) -> User | None:
        cursor = await self._database.db.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
        )
        row = await cursor.fetchone()
        return _row_to_user(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        cursor = await self._database.db.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?", (email,)
        )
        row = await cursor.fetchone()
        return _row_to_user(row) if row else None

    async def create(self, email: str, password_hash: str, name: str = "") -> User:
        """Insert a user. Raises ConflictError if the e-mail is taken."""
        now = encode_column(utc_now())
        try:
            cursor = await self._database.db.execute(
                "INSERT INTO users (email, password_hash, name, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (email, password_hash, name, now, now),
            )
        except sqlite3.IntegrityError as e:
            raise ConflictError(f"User already exists: {email}") from e
        await self._database.db.commit()

        user = await self.get(cursor.lastrowid)
        assert user is not None
        logger.info("user_created", user_id=user.id, email=email)
        return user
