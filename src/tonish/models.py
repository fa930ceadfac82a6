"""Shared data models for tasks, notebooks, pages and users.

Each model renders itself with to_dict() into a JSON-ready dict. Those dicts
are both the HTTP response bodies and the `data` payload of hub messages.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


def from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


@dataclass
class User:
    """A login account. The password hash never leaves the server."""

    id: int
    email: str
    password_hash: str
    name: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }


@dataclass
class Task:
    """A kanban card or Eisenhower-matrix item."""

    id: int
    title: str
    description: str = ""
    priority: str = "medium"  # low, medium, high
    status: str = "todo"  # todo, in-progress, done
    tags: str = ""  # JSON array stored as string
    due_date: datetime | None = None
    is_quick_task: bool = False
    quadrant: str = ""  # urgent-important, not-urgent-important, ...
    task_type: str = "kanban"  # kanban or matrix
    is_archived: bool = False
    completed_at: datetime | None = None
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    user_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "tags": self.tags,
            "due_date": to_iso(self.due_date),
            "is_quick_task": self.is_quick_task,
            "quadrant": self.quadrant,
            "task_type": self.task_type,
            "is_archived": self.is_archived,
            "completed_at": to_iso(self.completed_at),
            "deleted_at": to_iso(self.deleted_at),
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
            "user_id": self.user_id,
        }


@dataclass
class Page:
    """A rich-text page inside a notebook."""

    id: int
    notebook_id: int
    title: str
    content: str = ""  # editor JSON document
    tags: str = ""
    is_pinned: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "notebook_id": self.notebook_id,
            "title": self.title,
            "content": self.content,
            "tags": self.tags,
            "is_pinned": self.is_pinned,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
        }


@dataclass
class Notebook:
    """A named collection of pages."""

    id: int
    name: str
    tags: str = ""
    is_pinned: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    user_id: int = 0
    pages: list[Page] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tags": self.tags,
            "is_pinned": self.is_pinned,
            "created_at": to_iso(self.created_at),
            "updated_at": to_iso(self.updated_at),
            "user_id": self.user_id,
            "pages": [page.to_dict() for page in self.pages],
        }
