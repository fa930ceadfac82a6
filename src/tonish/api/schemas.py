"""Request bodies for the JSON API.

Update bodies overlay only the fields the client actually sent, so every
field is optional there; unknown fields (ids, timestamps echoed back by the
frontend) are ignored.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

# SQLite INTEGER range; user ids are unsigned.
MAX_ROW_ID = 2**63 - 1
RowId = Annotated[int, Field(ge=0, le=MAX_ROW_ID)]


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore")

    def supplied(self) -> dict[str, Any]:
        """Fields present in the request body."""
        return self.model_dump(exclude_unset=True)


class LoginRequest(_Body):
    email: str
    password: str


class RegisterRequest(_Body):
    email: str
    password: str
    name: str = ""


class TaskUpdate(_Body):
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    status: str | None = None
    tags: str | None = None
    due_date: datetime | None = None
    is_quick_task: bool | None = None
    quadrant: str | None = None
    task_type: str | None = None
    is_archived: bool | None = None
    completed_at: datetime | None = None
    user_id: RowId | None = None


class TaskCreate(TaskUpdate):
    title: str


class NotebookUpdate(_Body):
    name: str | None = None
    tags: str | None = None
    is_pinned: bool | None = None
    user_id: RowId | None = None


class NotebookCreate(NotebookUpdate):
    name: str


class PageUpdate(_Body):
    notebook_id: RowId | None = None
    title: str | None = None
    content: str | None = None
    tags: str | None = None
    is_pinned: bool | None = None


class PageCreate(PageUpdate):
    notebook_id: RowId
    title: str
