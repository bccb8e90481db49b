from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import RLock
from typing import List, Optional

from .errors import Conflict, InvalidParameter, NotFound
from .models import TodoEntity
from .schemas import TodoReplace

logger = logging.getLogger(__name__)

MAX_LIMIT = 10


@dataclass(frozen=True)
class ListQuery:
    """
    Query parameters for listing todos. ``None`` means "use the default".
    """
    offset: Optional[int] = None
    limit: Optional[int] = None


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def create(self, data: TodoReplace) -> TodoEntity:
        """Insert a new TodoEntity. Raise Conflict if the id is taken."""

    @abstractmethod
    def get(self, todo_id: int) -> TodoEntity:
        """Return a TodoEntity by id. Raise NotFound if absent."""

    @abstractmethod
    def replace(self, todo_id: int, data: TodoReplace) -> TodoEntity:
        """Overwrite an existing TodoEntity addressed by ``todo_id``. Raise NotFound if absent."""

    @abstractmethod
    def delete(self, todo_id: int) -> TodoEntity:
        """Remove a TodoEntity by id and return it. Raise NotFound if absent."""

    @abstractmethod
    def list(self, query: Optional[ListQuery] = None) -> List[TodoEntity]:
        """
        Return a page of TodoEntities in creation order.
        - offset defaults to 0, limit defaults to the max limit
        - limit is capped at the max limit
        - negative offset or limit raises InvalidParameter
        """

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored todos."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every todo."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository.

    Items live in an insertion-ordered dict keyed by id, so listing order is
    creation order and a replacement keeps the item's position. Every
    operation runs under one lock and hands out copies.
    """

    def __init__(self, max_limit: int = MAX_LIMIT) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self.max_limit = max_limit

    def create(self, data: TodoReplace) -> TodoEntity:
        entity: TodoEntity = {
            "id": data.id,
            "text": data.text,
            "completed": data.completed,
        }
        with self._lock:
            if entity["id"] in self._items:
                raise Conflict(f"Todo with id {entity['id']} already exists")
            self._items[entity["id"]] = entity
        logger.debug("Created todo %s", entity["id"])
        return entity.copy()

    def get(self, todo_id: int) -> TodoEntity:
        with self._lock:
            item = self._items.get(todo_id)
            if item is None:
                raise NotFound()
            return item.copy()

    def replace(self, todo_id: int, data: TodoReplace) -> TodoEntity:
        with self._lock:
            if todo_id not in self._items:
                raise NotFound()
            # The URL id stays the record's identity; body id is not cross-checked here
            updated: TodoEntity = {
                "id": todo_id,
                "text": data.text,
                "completed": data.completed,
            }
            self._items[todo_id] = updated
        logger.debug("Replaced todo %s", todo_id)
        return updated.copy()

    def delete(self, todo_id: int) -> TodoEntity:
        with self._lock:
            removed = self._items.pop(todo_id, None)
        if removed is None:
            raise NotFound()
        logger.debug("Deleted todo %s", todo_id)
        return removed

    def list(self, query: Optional[ListQuery] = None) -> List[TodoEntity]:
        q = query or ListQuery()
        offset = 0 if q.offset is None else q.offset
        limit = self.max_limit if q.limit is None else q.limit
        if offset < 0:
            raise InvalidParameter("offset must be >= 0")
        if limit < 0:
            raise InvalidParameter("limit must be >= 0")

        end = offset + min(limit, self.max_limit)
        with self._lock:
            page = list(self._items.values())[offset:end]
            # Return copies to avoid external mutation
            return [t.copy() for t in page]

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
