from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .errors import Unauthorized
from .settings import Settings

_security = HTTPBasic(auto_error=False)


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


# PUBLIC_INTERFACE
async def require_basic_auth(
    request: Request,
    creds: Optional[HTTPBasicCredentials] = Depends(_security),
) -> str:
    """
    Enforce HTTP Basic authentication against the configured credentials.

    Usage:
        @router.delete("/{todo_id}", dependencies=[Depends(require_basic_auth)])

    Returns:
        The authenticated username.

    Raises:
        Unauthorized (401, WWW-Authenticate: Basic) if credentials are missing,
        malformed or wrong.
    """
    if creds is None:
        raise Unauthorized("Not authenticated")

    settings: Settings = request.app.state.settings
    # Evaluate both comparisons so timing does not reveal which one failed
    user_ok = _matches(creds.username, settings.basic_auth_username)
    pass_ok = _matches(creds.password, settings.basic_auth_password)
    if not (user_ok and pass_ok):
        raise Unauthorized("Invalid authentication credentials")
    return creds.username
