"""
Store base - shared plumbing for the data-access services.

- StoreService holds the request's Session and turns SQLAlchemy failures
  into StoreError (after rolling the session back).
- insert_for() picks the dialect's INSERT so ON CONFLICT upserts work on
  PostgreSQL in production and SQLite in tests.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreError


logger = logging.getLogger("tekton.services.store")


def insert_for(db: Session, table: Table):
    """
    Return an INSERT for `table` that supports on_conflict_do_*().

    Both dialect constructs share the same on_conflict API.
    """
    dialect_name = db.get_bind().dialect.name
    if dialect_name == "postgresql":
        return postgresql.insert(table)
    if dialect_name == "sqlite":
        return sqlite.insert(table)
    raise StoreError(f"Upsert is not supported on the '{dialect_name}' database")


class StoreService:
    """Base class for services that read and write through one Session."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        """
        Wrap a unit of store work.

        Usage:
            with self._translate_errors("create project"):
                ...

        Raises:
            StoreError: "Failed to <action>: <database message>"
        """
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during '{action}': {e}")
            raise StoreError(f"Failed to {action}: {e}") from e
