"""
Reading Store Contract
======================

The narrow read/write contract the monitor depends on. Any backend that
implements ReadingStore can persist readings and serve the anomaly
baseline.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from abc import ABC, abstractmethod
from typing import Optional


class StorageError(Exception):
    """Connection or write failure in a reading store."""


class ReadingStore(ABC):
    """
    Durable store of (sensor_name, timestamp, value) rows.

    Rows are ordered by insertion (auto-increment id), not by timestamp.
    All methods raise StorageError on backend failure.
    """

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create the readings store if missing (idempotent)."""

    @abstractmethod
    def insert_reading(self, sensor_name: str, timestamp: str, value: float) -> None:
        pass

    @abstractmethod
    def recent_average(self, sensor_name: str, limit: int = 10) -> Optional[float]:
        """
        Mean of the `limit` most recently inserted readings for a sensor.

        Returns:
            The mean, or None if the sensor has no stored readings
        """

    @abstractmethod
    def delete_readings(self, sensor_name: str) -> None:
        pass

    @abstractmethod
    def clear_all(self) -> None:
        pass

    @abstractmethod
    def reading_count(self, sensor_name: str) -> int:
        pass

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
