"""
SQLite Reading Store
====================

ReadingStore backed by a single SQLite database file (or ":memory:").

One connection is opened per store and guarded by a lock, so writes for
a given sensor are serialized and the "most recent N" query always sees
every committed insert.

A locked database (sqlite3.OperationalError) is retried a bounded number
of times with exponential back-off before surfacing as StorageError.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import sqlite3
import threading
from contextlib import suppress
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from .base import ReadingStore, StorageError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS readings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    sensor_name TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    value REAL NOT NULL
)
"""

_INDEX = "CREATE INDEX IF NOT EXISTS idx_readings_sensor ON readings (sensor_name, id)"

_RECENT_AVERAGE = """
SELECT AVG(value), COUNT(*) FROM (
    SELECT value FROM readings
    WHERE sensor_name = ?
    ORDER BY id DESC
    LIMIT ?
)
"""


def _is_locked(exc: BaseException) -> bool:
    return isinstance(exc, sqlite3.OperationalError) and (
        "locked" in str(exc) or "busy" in str(exc)
    )


_retry_locked = retry(
    retry=retry_if_exception(_is_locked),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, min=0.05, max=1.0),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)


class SqliteReadingStore(ReadingStore):
    """
    Typical Use:
    >>> with SqliteReadingStore("SensorData.db") as store:
    ...     store.ensure_schema()
    ...     store.insert_reading("A1", "2026-01-01T00:00:00", 21.5)
    ...     store.recent_average("A1")
    21.5
    """

    def __init__(self, path: str = "SensorData.db", timeout: float = 5.0):
        self.path = path
        self.timeout = timeout
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(
                path, timeout=timeout, check_same_thread=False
            )
        except sqlite3.Error as e:
            raise StorageError(f"Could not open database {path}: {e}") from e

    def _execute(self, sql: str, params: tuple = (), commit: bool = False):
        with self._lock:
            try:
                rows = self._run(sql, params)
                if commit:
                    self._commit()
                return rows
            except sqlite3.Error as e:
                if commit:
                    # Uncommitted work must not ride along with the next commit
                    with suppress(sqlite3.Error):
                        self._conn.rollback()
                raise StorageError(f"{type(e).__name__}: {e}") from e

    @_retry_locked
    def _run(self, sql: str, params: tuple):
        return self._conn.execute(sql, params).fetchall()

    @_retry_locked
    def _commit(self) -> None:
        self._conn.commit()

    def ensure_schema(self) -> None:
        self._execute(_SCHEMA, commit=True)
        self._execute(_INDEX, commit=True)

    def insert_reading(self, sensor_name: str, timestamp: str, value: float) -> None:
        self._execute(
            "INSERT INTO readings (sensor_name, timestamp, value) VALUES (?, ?, ?)",
            (sensor_name, timestamp, float(value)),
            commit=True,
        )

    def recent_average(self, sensor_name: str, limit: int = 10) -> Optional[float]:
        if limit < 1:
            raise ValueError(f"Limit must be positive, got {limit}")
        rows = self._execute(_RECENT_AVERAGE, (sensor_name, limit))
        average, count = rows[0]
        if count == 0:
            return None
        return float(average)

    def delete_readings(self, sensor_name: str) -> None:
        self._execute(
            "DELETE FROM readings WHERE sensor_name = ?", (sensor_name,), commit=True
        )

    def clear_all(self) -> None:
        self._execute("DELETE FROM readings", commit=True)

    def reading_count(self, sensor_name: str) -> int:
        rows = self._execute(
            "SELECT COUNT(*) FROM readings WHERE sensor_name = ?", (sensor_name,)
        )
        return int(rows[0][0])

    def close(self) -> None:
        with self._lock:
            try:
                self._conn.close()
            except sqlite3.Error as e:
                logger.warning(f"Error closing database {self.path}: {e}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path='{self.path}')"
