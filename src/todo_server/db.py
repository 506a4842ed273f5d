from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, List, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from .errors import DatabaseConnectionError, PersistenceError, TodoNotFoundError
from .models import TodoEntity
from .repositories import Repository, utcnow

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value.
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


class Base(DeclarativeBase):
    pass


class TodoRecord(Base):
    """ORM mapping of the todos table."""

    __tablename__ = "todos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything stored is UTC.
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SQLAlchemyRepository(Repository):
    """
    SQLite-backed repository implementing the Repository interface.

    Every call runs in its own short-lived session that commits on success.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._sessions = sessionmaker(bind=engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _session(self, action: str) -> Generator[Session, None, None]:
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("failed to %s: %s", action, exc)
            raise PersistenceError(f"failed to {action}: {exc}") from exc
        finally:
            session.close()

    @staticmethod
    def _live(session: Session, todo_id: int) -> Optional[TodoRecord]:
        if not SQLITE_INT_MIN <= todo_id <= SQLITE_INT_MAX:
            return None
        stmt = select(TodoRecord).where(TodoRecord.id == todo_id, TodoRecord.deleted_at.is_(None))
        return session.scalars(stmt).first()

    @staticmethod
    def _record_to_entity(record: TodoRecord) -> TodoEntity:
        return {
            "id": int(record.id),
            "description": record.description,
            "completed": bool(record.completed),
            "created_at": _as_utc(record.created_at),  # type: ignore
            "updated_at": _as_utc(record.updated_at),  # type: ignore
            "deleted_at": _as_utc(record.deleted_at),
        }

    def list_by_completion(self, completed: bool) -> List[TodoEntity]:
        with self._session("list todos") as session:
            stmt = (
                select(TodoRecord)
                .where(TodoRecord.completed == completed, TodoRecord.deleted_at.is_(None))
                .order_by(TodoRecord.id)
            )
            return [self._record_to_entity(r) for r in session.scalars(stmt)]

    def create(self, description: str) -> TodoEntity:
        record = TodoRecord(description=description, completed=False)
        with self._session("create todo") as session:
            session.add(record)
            session.flush()
            entity = self._record_to_entity(record)
        logger.info("created todo %d", entity["id"])
        return entity

    def get(self, todo_id: int) -> TodoEntity:
        with self._session("look up todo") as session:
            record = self._live(session, todo_id)
            if record is None:
                logger.warning("todo item not found in database: %d", todo_id)
                raise TodoNotFoundError(todo_id)
            return self._record_to_entity(record)

    def update(self, todo: TodoEntity) -> TodoEntity:
        with self._session("update todo") as session:
            record = self._live(session, todo["id"])
            if record is None:
                raise PersistenceError(f"cannot update todo {todo['id']}: record is gone")
            record.description = todo["description"]
            record.completed = todo["completed"]
            record.updated_at = utcnow()
            session.flush()
            return self._record_to_entity(record)

    def delete(self, todo: TodoEntity) -> None:
        with self._session("delete todo") as session:
            record = self._live(session, todo["id"])
            if record is None:
                raise PersistenceError(f"cannot delete todo {todo['id']}: record is gone")
            now = utcnow()
            record.deleted_at = now
            record.updated_at = now
        logger.info("soft-deleted todo %d", todo["id"])


# PUBLIC_INTERFACE
def open_database(db_path: str, echo: bool = False) -> SQLAlchemyRepository:
    """
    Open (creating if needed) the SQLite file at db_path, make sure the todos
    table exists and return a repository bound to it.

    Raises:
        DatabaseConnectionError if the file cannot be opened or the schema created.
    """
    try:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
    except OSError as exc:
        logger.error("failed to prepare database directory for %s", db_path)
        raise DatabaseConnectionError(f"cannot create directory for {db_path}: {exc}") from exc

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=echo,
        # Handlers run on FastAPI's thread pool.
        connect_args={"check_same_thread": False},
    )
    try:
        Base.metadata.create_all(engine)
    except SQLAlchemyError as exc:
        engine.dispose()
        logger.error("failed to connect to sqlite database %s", db_path)
        raise DatabaseConnectionError(f"cannot open database {db_path}: {exc}") from exc

    logger.info("database ready at %s", db_path)
    return SQLAlchemyRepository(engine)
