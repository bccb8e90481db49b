from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status

from ..auth import require_basic_auth
from ..errors import InvalidPayload, UnsupportedContentType
from ..hub import BroadcastHub, publish
from ..models import TodoEntity
from ..repositories import ListQuery, Repository
from ..schemas import TodoCreate, TodoEvent, TodoEventType, TodoOut, TodoReplace
from ..settings import Settings
from ..utils import is_json_content_type, parse_todo_id

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)


def get_repository(request: Request) -> Repository:
    """
    Dependency returning the app's single store instance.
    """
    return request.app.state.repository


def get_hub(request: Request) -> BroadcastHub:
    return request.app.state.hub


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def require_json_content(request: Request) -> None:
    """
    Reject bodies that are not declared as JSON with 415.

    Declared as the first route dependency so it is evaluated before body
    validation and before any auth dependency.
    """
    if not is_json_content_type(request.headers.get("content-type")):
        raise UnsupportedContentType()


def _notify(background_tasks: BackgroundTasks, hub: BroadcastHub, kind: TodoEventType, todo: TodoEntity) -> None:
    # Runs after the response is sent; delivery never delays the HTTP caller
    background_tasks.add_task(publish, hub, TodoEvent(event=kind, todo=TodoOut(**todo)))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description=(
        "List todos in creation order.\n\n"
        "Query parameters:\n"
        "- offset: number of items to skip (>=0, default 0)\n"
        "- limit: max number of items to return (>=0, capped at the configured maximum, default that maximum)"
    ),
    responses={
        200: {"description": "List retrieved successfully"},
        400: {"description": "Invalid pagination parameters"},
    },
)
def list_todos(
    offset: Optional[int] = Query(None, description="Number of items to skip"),
    limit: Optional[int] = Query(None, description="Maximum number of items to return"),
    repo: Repository = Depends(get_repository),
) -> List[TodoOut]:
    """
    List todos with offset/limit pagination.
    """
    items = repo.list(ListQuery(offset=offset, limit=limit))
    return [TodoOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_json_content)],
    summary="Create Todo",
    description="Create a new Todo item with a client-supplied id and return the stored resource.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Invalid payload or duplicate id"},
        415: {"description": "Content-Type is not JSON"},
    },
)
def create_todo(
    payload: TodoCreate,
    background_tasks: BackgroundTasks,
    repo: Repository = Depends(get_repository),
    hub: BroadcastHub = Depends(get_hub),
) -> TodoOut:
    """
    Create a new Todo.
    """
    created = repo.create(payload)
    _notify(background_tasks, hub, TodoEventType.created, created)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: str, repo: Repository = Depends(get_repository)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    return TodoOut(**repo.get(parse_todo_id(todo_id)))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    dependencies=[Depends(require_json_content)],
    summary="Replace Todo",
    description=(
        "Replace the text and completion flag of the Todo addressed by the URL id. "
        "The body id is accepted without being compared to the URL id unless "
        "STRICT_PUT_ID is enabled."
    ),
    responses={
        200: {"description": "Todo updated"},
        400: {"description": "Invalid payload"},
        404: {"description": "Todo not found"},
        415: {"description": "Content-Type is not JSON"},
    },
)
def put_todo(
    todo_id: str,
    payload: TodoReplace,
    background_tasks: BackgroundTasks,
    repo: Repository = Depends(get_repository),
    hub: BroadcastHub = Depends(get_hub),
    settings: Settings = Depends(get_app_settings),
) -> TodoOut:
    """
    Full replacement of an existing Todo.
    """
    url_id = parse_todo_id(todo_id)
    if settings.strict_put_id and payload.id != url_id:
        raise InvalidPayload(f"Body id {payload.id} does not match URL id {url_id}")
    if settings.strict_text and not payload.text:
        raise InvalidPayload("text must not be empty")

    updated = repo.replace(url_id, payload)
    _notify(background_tasks, hub, TodoEventType.updated, updated)
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_basic_auth)],
    summary="Delete Todo",
    description="Delete a Todo item by ID. Requires HTTP Basic credentials.",
    responses={
        204: {"description": "Todo deleted"},
        401: {"description": "Missing or invalid credentials"},
        404: {"description": "Todo not found"},
    },
)
def delete_todo(
    todo_id: str,
    background_tasks: BackgroundTasks,
    repo: Repository = Depends(get_repository),
    hub: BroadcastHub = Depends(get_hub),
) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found or the id is not numeric.
    """
    removed = repo.delete(parse_todo_id(todo_id))
    _notify(background_tasks, hub, TodoEventType.deleted, removed)
    return None
