from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from threading import RLock
from typing import List

from fastapi import Request

from .errors import PersistenceError, TodoNotFoundError
from .models import TodoEntity

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def list_by_completion(self, completed: bool) -> List[TodoEntity]:
        """Return every live todo whose completed flag matches, ordered by id."""

    @abstractmethod
    def create(self, description: str) -> TodoEntity:
        """Insert a pending todo and return it with its assigned id."""

    @abstractmethod
    def get(self, todo_id: int) -> TodoEntity:
        """Return the live todo with this id or raise TodoNotFoundError."""

    @abstractmethod
    def update(self, todo: TodoEntity) -> TodoEntity:
        """Persist description and completed of an existing todo and return the stored record."""

    @abstractmethod
    def delete(self, todo: TodoEntity) -> None:
        """Soft-delete a todo by stamping its deleted_at marker."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository used as a stand-in for the database in tests.

    Soft-deleted items stay in the map, the same way the SQL backend keeps rows.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def _live(self, todo_id: int) -> TodoEntity | None:
        item = self._items.get(todo_id)
        if item is None or item["deleted_at"] is not None:
            return None
        return item

    def list_by_completion(self, completed: bool) -> List[TodoEntity]:
        with self._lock:
            return [
                t.copy()
                for _, t in sorted(self._items.items())
                if t["deleted_at"] is None and t["completed"] == completed
            ]

    def create(self, description: str) -> TodoEntity:
        now = utcnow()
        entity: TodoEntity = {
            "id": self._allocate_id(),
            "description": description,
            "completed": False,
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def get(self, todo_id: int) -> TodoEntity:
        with self._lock:
            item = self._live(todo_id)
            if item is None:
                logger.warning("todo item not found: %d", todo_id)
                raise TodoNotFoundError(todo_id)
            return item.copy()

    def update(self, todo: TodoEntity) -> TodoEntity:
        with self._lock:
            existing = self._live(todo["id"])
            if existing is None:
                raise PersistenceError(f"cannot update todo {todo['id']}: record is gone")
            updated = existing.copy()
            updated["description"] = todo["description"]
            updated["completed"] = todo["completed"]
            updated["updated_at"] = utcnow()
            self._items[todo["id"]] = updated
            return updated.copy()

    def delete(self, todo: TodoEntity) -> None:
        with self._lock:
            existing = self._live(todo["id"])
            if existing is None:
                raise PersistenceError(f"cannot delete todo {todo['id']}: record is gone")
            now = utcnow()
            existing["deleted_at"] = now
            existing["updated_at"] = now


# PUBLIC_INTERFACE
def get_repository(request: Request) -> Repository:
    """
    FastAPI dependency returning the repository the app was built with
    (see main.create_app).
    """
    return request.app.state.repository
