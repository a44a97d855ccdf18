# Overview: Row locking and commit helpers shared by the service layer.

from __future__ import annotations

from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db
from ..validation import ConflictError


class ConcurrentUpdateError(ConflictError):
    """Raised when a row changed underneath an update (optimistic lock)."""


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def commit_or_conflict(entity: str = "record") -> None:
    """
    Commit the current session, turning optimistic-lock failures into
    ConcurrentUpdateError. Nothing is retried.
    """
    try:
        db.session.commit()
    except StaleDataError as exc:
        db.session.rollback()
        raise ConcurrentUpdateError(f"{entity} was modified concurrently; reload and try again") from exc
