import pytest
from fastapi.testclient import TestClient

from todo_server.db import open_database
from todo_server.main import create_app
from todo_server.repositories import InMemoryRepository
from todo_server.settings import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_file=str(tmp_path / "unused.db"),
        cors_allow_origins=["*"],
        log_level="INFO",
        db_echo=False,
    )


@pytest.fixture
def sqlite_repo(tmp_path):
    repo = open_database(str(tmp_path / "todos.db"))
    yield repo
    repo.engine.dispose()


# Every API and repository test runs against the SQLite store and the in-memory fake.
@pytest.fixture(params=["sqlite", "memory"])
def repo(request):
    if request.param == "sqlite":
        return request.getfixturevalue("sqlite_repo")
    return InMemoryRepository()


@pytest.fixture
def client(repo, settings):
    with TestClient(create_app(repo, settings)) as c:
        yield c
