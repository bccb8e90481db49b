from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TODO_HOST: bind host (default '0.0.0.0')
    - TODO_PORT: bind port (default 8080)
    - TODO_MAX_LIMIT: maximum page size for GET /todos (default 10)
    - BASIC_AUTH_USERNAME / BASIC_AUTH_PASSWORD: credentials required by DELETE (default admin/admin)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - STRICT_PUT_ID: 'true' to reject PUT bodies whose id differs from the URL id (default: false)
    - STRICT_TEXT: 'true' to reject empty text on PUT as well as POST (default: false)
    - WS_QUEUE_SIZE: outbound notification queue bound per WebSocket subscriber (default 64)
    - LOG_LEVEL: root log level (default INFO)
    """

    host: str = "0.0.0.0"
    port: int = 8080
    max_limit: int = 10
    basic_auth_username: str = "admin"
    basic_auth_password: str = "admin"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    strict_put_id: bool = False
    strict_text: bool = False
    ws_queue_size: int = 64
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int, minimum: int = 0) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= minimum else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    return Settings(
        host=_get_env("TODO_HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("TODO_PORT", "8080"), 8080, minimum=1),
        max_limit=_parse_int(_get_env("TODO_MAX_LIMIT", "10"), 10, minimum=1),
        basic_auth_username=_get_env("BASIC_AUTH_USERNAME", "admin"),
        basic_auth_password=_get_env("BASIC_AUTH_PASSWORD", "admin"),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        strict_put_id=_parse_bool(_get_env("STRICT_PUT_ID", "false"), False),
        strict_text=_parse_bool(_get_env("STRICT_TEXT", "false"), False),
        ws_queue_size=_parse_int(_get_env("WS_QUEUE_SIZE", "64"), 64, minimum=1),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
