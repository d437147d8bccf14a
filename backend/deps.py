"""
Shared FastAPI dependencies.

Routers import from this single place: DB session, admin guard, pagination.
"""

from __future__ import annotations

from typing import TypedDict

from fastapi import Query

from database import get_db  # noqa: F401
from middleware.auth import require_admin  # noqa: F401


class Pagination(TypedDict):
    limit: int
    offset: int


def pagination_params(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0, le=100_000),
) -> Pagination:
    return {"limit": limit, "offset": offset}
