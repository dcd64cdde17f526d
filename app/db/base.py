"""
Declarative base - every ORM model inherits from Base.

Importing app.models registers all tables on Base.metadata, which is
what alembic and the test fixtures use.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """SQLAlchemy 2.0 declarative base class."""
    pass
