"""Relational persistence: Database handle, ORM models, repositories."""

from entitystore.infrastructure.persistence.database import Base, Database

__all__ = ["Base", "Database"]
