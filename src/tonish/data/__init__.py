"""Persistence layer.

Provides the SQLite connection manager and typed stores for users,
tasks (with soft delete), and notebooks with their pages.
"""

from tonish.data.database import TonishDatabase
from tonish.data.notebooks import NotebookStore
from tonish.data.tasks import TaskStore
from tonish.data.users import UserStore

__all__ = [
    "NotebookStore",
    "TaskStore",
    "TonishDatabase",
    "UserStore",
]
