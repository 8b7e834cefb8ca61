"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

Key-value table backing the durable storage backend.

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                       storage_entries                            │
    ├─────────────────────────────────────────────────────────────────┤
    │ key (VARCHAR, PK)                                               │
    │ value (TEXT, NOT NULL)       JSON document                      │
    │ updated_at (DATETIME, AUTO UPDATE)                              │
    └─────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text, func

from product_portal.db.database import Base


class StorageEntry(Base):
    """One value stored under a fixed key, like a browser's localStorage."""

    __tablename__ = "storage_entries"

    key = Column(String(200), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<StorageEntry(key={self.key!r}, size={len(self.value or '')})>"
