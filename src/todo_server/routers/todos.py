from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from ..errors import PersistenceError, TodoNotFoundError
from ..repositories import Repository, get_repository
from ..schemas import DeletedOut, TodoCreateRequest, TodoOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["todos"])


def _error(exc: Exception, status_code: int) -> PlainTextResponse:
    """Send the raw error message back as a plain-text body."""
    return PlainTextResponse(str(exc), status_code=status_code)


# PUBLIC_INTERFACE
@router.get(
    "/todo-completed",
    response_model=List[TodoOut],
    summary="List completed todos",
)
def get_completed(repo: Repository = Depends(get_repository)) -> List[TodoOut]:
    """Return every live todo that is marked completed."""
    return [TodoOut(**t) for t in repo.list_by_completion(True)]


# PUBLIC_INTERFACE
@router.get(
    "/todo-pending",
    response_model=List[TodoOut],
    summary="List pending todos",
)
def get_pending(repo: Repository = Depends(get_repository)) -> List[TodoOut]:
    """Return every live todo that is still pending."""
    return [TodoOut(**t) for t in repo.list_by_completion(False)]


# PUBLIC_INTERFACE
@router.put(
    "/todo",
    response_model=TodoOut,
    summary="Create Todo",
    description="Create a new pending Todo item and return the stored record.",
    responses={
        200: {"description": "Todo created"},
        400: {"description": "Malformed body or write failure"},
    },
)
def create_todo(payload: TodoCreateRequest, repo: Repository = Depends(get_repository)) -> TodoOut:
    """
    Create a new Todo. A body without a description still creates one, with an
    empty description.
    """
    try:
        created = repo.create(payload.description)
    except PersistenceError as exc:
        return _error(exc, status.HTTP_400_BAD_REQUEST)  # type: ignore[return-value]
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.post(
    "/todo/{todo_id}",
    response_model=TodoOut,
    summary="Toggle Todo",
    description="Flip the completed flag of a Todo item.",
    responses={
        200: {"description": "Todo toggled"},
        400: {"description": "Todo not found"},
        500: {"description": "Write failure"},
    },
)
def update_todo(todo_id: int, repo: Repository = Depends(get_repository)) -> TodoOut:
    try:
        todo = repo.get(todo_id)
    except (TodoNotFoundError, PersistenceError) as exc:
        return _error(exc, status.HTTP_400_BAD_REQUEST)  # type: ignore[return-value]

    todo["completed"] = not todo["completed"]
    try:
        updated = repo.update(todo)
    except PersistenceError as exc:
        return _error(exc, status.HTTP_500_INTERNAL_SERVER_ERROR)  # type: ignore[return-value]
    logger.debug("todo %d completed=%s", updated["id"], updated["completed"])
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/todo/{todo_id}",
    response_model=DeletedOut,
    summary="Delete Todo",
    description="Soft-delete a Todo item; it disappears from both lists.",
    responses={
        200: {"description": "Todo deleted"},
        400: {"description": "Todo not found"},
        500: {"description": "Delete failure"},
    },
)
def delete_todo(todo_id: int, repo: Repository = Depends(get_repository)) -> DeletedOut:
    try:
        todo = repo.get(todo_id)
    except (TodoNotFoundError, PersistenceError) as exc:
        return _error(exc, status.HTTP_400_BAD_REQUEST)  # type: ignore[return-value]

    try:
        repo.delete(todo)
    except PersistenceError as exc:
        return _error(exc, status.HTTP_500_INTERNAL_SERVER_ERROR)  # type: ignore[return-value]
    return DeletedOut()
