"""
Storage Package
===============

Persistence collaborators for the monitor.

This package provides:
- ReadingStore: read/write contract for persisted readings
- SqliteReadingStore: SQLite-backed store
- InMemoryReadingStore: dict-backed store
- ActivityLog: append-only text log of readings

It does NOT:
- Know about simulation, thresholds or anomalies
- Retry on behalf of the caller (except the SQLite store's own
  locked-database back-off)

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from .base import ReadingStore, StorageError
from .sqlite_store import SqliteReadingStore
from .memory_store import InMemoryReadingStore
from .activity_log import ActivityLog

__all__ = [
    "ReadingStore",
    "StorageError",
    "SqliteReadingStore",
    "InMemoryReadingStore",
    "ActivityLog",
]
