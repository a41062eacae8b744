"""Results store adapters (SQLAlchemy and in-memory)."""

from .memory import MemoryResultsStore
from .sqlalchemy_store import SqlAlchemyResultsStore, sqlalchemy_store_factory

__all__ = ["MemoryResultsStore", "SqlAlchemyResultsStore", "sqlalchemy_store_factory"]
