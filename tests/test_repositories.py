import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from todo_server.db import TodoRecord, open_database
from todo_server.errors import DatabaseConnectionError, PersistenceError, TodoNotFoundError


class TestRepositoryContract:
    def test_create_assigns_id_and_defaults(self, repo):
        todo = repo.create("buy milk")
        assert todo["id"] >= 1
        assert todo["description"] == "buy milk"
        assert todo["completed"] is False
        assert todo["deleted_at"] is None
        assert todo["created_at"].tzinfo is not None

    def test_get_returns_requested_record(self, repo):
        first = repo.create("first")
        second = repo.create("second")
        assert repo.get(second["id"])["description"] == "second"
        assert repo.get(first["id"])["description"] == "first"

    def test_get_missing_raises(self, repo):
        with pytest.raises(TodoNotFoundError) as info:
            repo.get(42)
        assert info.value.todo_id == 42

    def test_get_out_of_range_id_raises(self, repo):
        repo.create("x")
        with pytest.raises(TodoNotFoundError):
            repo.get(2**64)
        with pytest.raises(TodoNotFoundError):
            repo.get(-(2**64))

    def test_list_by_completion(self, repo):
        a = repo.create("a")
        b = repo.create("b")
        c = repo.create("c")
        b["completed"] = True
        repo.update(b)

        assert [t["id"] for t in repo.list_by_completion(False)] == [a["id"], c["id"]]
        assert [t["id"] for t in repo.list_by_completion(True)] == [b["id"]]

    def test_list_empty(self, repo):
        assert repo.list_by_completion(True) == []
        assert repo.list_by_completion(False) == []

    def test_update_persists_fields(self, repo):
        todo = repo.create("draft")
        todo["description"] = "final"
        todo["completed"] = True
        updated = repo.update(todo)
        assert updated["description"] == "final"
        assert updated["completed"] is True
        assert updated["updated_at"] >= updated["created_at"]

        fetched = repo.get(todo["id"])
        assert fetched["description"] == "final"
        assert fetched["completed"] is True

    def test_returned_snapshot_is_detached(self, repo):
        todo = repo.create("x")
        todo["completed"] = True
        assert repo.get(todo["id"])["completed"] is False

    def test_delete_hides_record(self, repo):
        todo = repo.create("gone")
        repo.delete(todo)
        with pytest.raises(TodoNotFoundError):
            repo.get(todo["id"])
        assert repo.list_by_completion(False) == []

    def test_delete_twice_fails(self, repo):
        todo = repo.create("gone")
        repo.delete(todo)
        with pytest.raises(PersistenceError):
            repo.delete(todo)

    def test_update_deleted_fails(self, repo):
        todo = repo.create("gone")
        repo.delete(todo)
        todo["completed"] = True
        with pytest.raises(PersistenceError):
            repo.update(todo)


class TestSQLiteStore:
    def test_delete_is_soft(self, sqlite_repo):
        todo = sqlite_repo.create("keep the row")
        sqlite_repo.delete(todo)

        with Session(sqlite_repo.engine) as session:
            record = session.scalars(select(TodoRecord).where(TodoRecord.id == todo["id"])).one()
        assert record.deleted_at is not None

    def test_data_survives_reopen(self, tmp_path):
        path = str(tmp_path / "todos.db")
        repo = open_database(path)
        todo = repo.create("persisted")
        repo.engine.dispose()

        reopened = open_database(path)
        assert reopened.get(todo["id"])["description"] == "persisted"
        reopened.engine.dispose()

    def test_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "todos.db"
        repo = open_database(str(path))
        repo.engine.dispose()
        assert path.exists()

    def test_unopenable_path_raises(self, tmp_path):
        # A directory cannot be opened as a database file.
        with pytest.raises(DatabaseConnectionError):
            open_database(str(tmp_path))

    def test_write_failure_is_persistence_error(self, sqlite_repo):
        todo = sqlite_repo.create("x")
        TodoRecord.__table__.drop(sqlite_repo.engine)
        with pytest.raises(PersistenceError):
            sqlite_repo.create("y")
        with pytest.raises(PersistenceError):
            sqlite_repo.list_by_completion(False)
        with pytest.raises(PersistenceError):
            sqlite_repo.get(todo["id"])
