"""
Database-related dependencies.
"""

from typing import Generator

from sqlalchemy.orm import Session

from ...database import get_db as _get_db


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped session; commits on success, rolls back on error."""
    yield from _get_db()
