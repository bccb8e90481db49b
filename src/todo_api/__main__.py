"""
Run the Todo service under uvicorn.

Usage:
    python -m todo_api

Host, port and log level come from TODO_HOST, TODO_PORT and LOG_LEVEL.
"""
from __future__ import annotations

import uvicorn

from .logging_config import setup_logging
from .settings import get_settings


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(
        "todo_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
