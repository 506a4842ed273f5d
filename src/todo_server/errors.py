"""
Error taxonomy shared by the persistence layer and the HTTP handlers.

Handlers decide the status code: lookup misses are the client's fault (400),
failed writes are the server's (500).
"""


class TodoError(Exception):
    """Base class for every error raised by the todo server."""


class DatabaseConnectionError(TodoError):
    """The database file could not be opened or its schema created."""


class PersistenceError(TodoError):
    """A statement against the database failed."""


class TodoNotFoundError(TodoError):
    """No live (non-deleted) todo exists with the requested id."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"record not found: todo {todo_id}")
        self.todo_id = todo_id
