"""
In-Memory Reading Store
=======================

Thread-safe ReadingStore kept in a dict keyed by sensor name.

Same contract as the SQLite store; nothing survives the process.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import threading
from typing import Dict, List, Optional, Tuple

import numpy as np

from .base import ReadingStore


class InMemoryReadingStore(ReadingStore):
    """
    Row ids are global and increasing, matching the SQLite store, so
    "most recent" means last inserted.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._rows: Dict[str, List[Tuple[int, str, float]]] = {}
        self._next_id = 1
        self._schema_ready = False

    def ensure_schema(self) -> None:
        with self._lock:
            self._schema_ready = True

    def insert_reading(self, sensor_name: str, timestamp: str, value: float) -> None:
        with self._lock:
            self._rows.setdefault(sensor_name, []).append(
                (self._next_id, timestamp, float(value))
            )
            self._next_id += 1

    def recent_average(self, sensor_name: str, limit: int = 10) -> Optional[float]:
        if limit < 1:
            raise ValueError(f"Limit must be positive, got {limit}")
        with self._lock:
            rows = self._rows.get(sensor_name, [])
            if not rows:
                return None
            recent = [value for _, _, value in reversed(rows[-limit:])]
        return float(np.mean(recent))

    def delete_readings(self, sensor_name: str) -> None:
        with self._lock:
            self._rows.pop(sensor_name, None)

    def clear_all(self) -> None:
        with self._lock:
            self._rows.clear()

    def reading_count(self, sensor_name: str) -> int:
        with self._lock:
            return len(self._rows.get(sensor_name, []))

    def readings(self, sensor_name: str) -> List[Tuple[str, float]]:
        """(timestamp, value) pairs for a sensor, oldest first."""
        with self._lock:
            return [(ts, value) for _, ts, value in self._rows.get(sensor_name, [])]
