import time

import pytest
from fastapi.testclient import TestClient

from todo_api.main import create_app
from todo_api.settings import Settings


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the client keeps one event loop for HTTP calls and WebSocket sessions
    with TestClient(app) as c:
        yield c


def make_todo(todo_id=1, text="Test TODO", completed=False):
    return {"id": todo_id, "text": text, "completed": completed}


def wait_for_subscribers(client, count, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if client.get("/").json()["subscribers"] == count:
            return
        time.sleep(0.01)
    raise AssertionError(f"expected {count} subscriber(s)")
