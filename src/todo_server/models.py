from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A detached snapshot of a Todo record, independent of any ORM session.

    Fields:
    - id: Unique integer identifier assigned by the store
    - description: Free-text description (may be empty)
    - completed: Boolean completion flag
    - created_at: UTC creation timestamp
    - updated_at: UTC timestamp of the last write
    - deleted_at: UTC soft-delete marker, None while the record is live
    """

    id: int
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime]
