"""
Todo service package.

In-memory Todo REST API with a WebSocket push channel. The application
factory is ``todo_api.main.create_app``; ``todo_api.main.app`` is a
ready-built instance configured from the environment.
"""
