"""
Helpers for working with SQLAlchemy sessions in a dialect-agnostic way.
"""

from __future__ import annotations

from sqlalchemy.orm import Session


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """
    Return the dialect name of the engine bound to a session.

    Falls back to ``default`` when the bound engine cannot be resolved.
    """
    bind = session.get_bind()
    if bind is None:
        return default
    return getattr(bind.dialect, "name", None) or default
