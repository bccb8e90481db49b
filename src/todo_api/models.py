from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo item held by the store.

    Fields:
    - id: Client-supplied 64-bit integer identifier, unique among live items
    - text: Todo text
    - completed: Boolean completion flag
    """

    id: int
    text: str
    completed: bool
