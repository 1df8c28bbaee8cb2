"""
Base ORM Model.

Declarative base shared by all storage models. Timestamps in this
schema are stored as epoch milliseconds so that expiry comparisons
behave identically on SQLite and PostgreSQL.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""
    pass
