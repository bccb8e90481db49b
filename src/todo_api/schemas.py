from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

# Signed 64-bit range for client-supplied ids
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


# PUBLIC_INTERFACE
class TodoReplace(BaseModel):
    """
    Schema for replacing an existing Todo item via PUT.

    All three fields are required and strictly typed: ``id`` must be a JSON
    integer and ``completed`` a JSON boolean. ``text`` may be empty here; the
    router rejects empty text only when strict text checking is enabled.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"id": 1, "text": "Buy groceries", "completed": True}
        }
    )

    id: StrictInt = Field(..., ge=ID_MIN, le=ID_MAX, description="Todo identifier")
    text: StrictStr = Field(..., description="Todo text")
    completed: StrictBool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class TodoCreate(TodoReplace):
    """
    Schema for creating a new Todo item. Same shape as a replacement, but
    ``text`` must be non-empty.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"id": 1, "text": "Buy groceries", "completed": False}
        }
    )

    text: StrictStr = Field(..., min_length=1, description="Todo text (non-empty)")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"id": 123, "text": "Buy groceries", "completed": False}
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    text: str = Field(..., description="Todo text")
    completed: bool = Field(..., description="Completion status flag")


class TodoEventType(str, Enum):
    created = "created"
    updated = "updated"
    deleted = "deleted"


# PUBLIC_INTERFACE
class TodoEvent(BaseModel):
    """
    Notification pushed to WebSocket subscribers after every store mutation.
    """

    event: TodoEventType = Field(..., description="Kind of mutation")
    todo: TodoOut = Field(..., description="Record after creation/replacement, or the removed record")
