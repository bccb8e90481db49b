from __future__ import annotations

import re
from typing import Optional

from .errors import NotFound
from .schemas import ID_MAX, ID_MIN

_ID_SEGMENT = re.compile(r"-?[0-9]+")


# PUBLIC_INTERFACE
def is_json_content_type(content_type: Optional[str]) -> bool:
    """
    Return True when a Content-Type header names a JSON media type.

    Accepts 'application/json' and structured-syntax types such as
    'application/merge-patch+json', with or without parameters
    (e.g. '; charset=utf-8'). Matching is case-insensitive.
    """
    if not content_type:
        return False
    media_type = content_type.split(";", 1)[0].strip().lower()
    main_type, _, subtype = media_type.partition("/")
    return main_type == "application" and (subtype == "json" or subtype.endswith("+json"))


# PUBLIC_INTERFACE
def parse_todo_id(raw: str) -> int:
    """
    Convert a path segment into a todo id.

    A segment that is not a 64-bit integer can never address a stored todo,
    so it is reported as NotFound rather than as a bad request. Only ASCII
    digits with an optional leading minus count as numeric.
    """
    if not _ID_SEGMENT.fullmatch(raw):
        raise NotFound()
    todo_id = int(raw)
    if not ID_MIN <= todo_id <= ID_MAX:
        raise NotFound()
    return todo_id
