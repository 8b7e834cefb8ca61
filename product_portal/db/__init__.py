"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy infrastructure for the durable key-value storage backend.

Architecture:
------------
├── database.py   - DatabaseManager class, session factory
└── models.py     - StorageEntry key-value table

==============================================================================
"""

from .database import Base, DatabaseManager
from .models import StorageEntry

__all__ = [
    "Base",
    "DatabaseManager",
    "StorageEntry",
]
