"""Shared fixtures for the sensor simulation tests."""

from datetime import datetime
from typing import List, Optional

import pytest

from sensor_sim.core.random_source import RandomSource
from sensor_sim.sensors import Sensor, SensorConfig
from sensor_sim.storage import InMemoryReadingStore, StorageError


class ScriptedRandomSource(RandomSource):
    """
    Replays queued fractions in [0, 1], mapped onto the requested interval.

    Once the script runs out every draw returns the interval midpoint,
    i.e. zero drift and an unchanged noise level.
    """

    def __init__(self, fractions: Optional[List[float]] = None):
        self.fractions = list(fractions or [])
        self.calls = 0

    def uniform(self, low: float, high: float) -> float:
        self.calls += 1
        f = self.fractions.pop(0) if self.fractions else 0.5
        return low + f * (high - low)


class FailingStore(InMemoryReadingStore):
    """In-memory store whose inserts fail for selected sensors."""

    def __init__(self, failing: List[str]):
        super().__init__()
        self.failing = set(failing)

    def insert_reading(self, sensor_name, timestamp, value):
        if sensor_name in self.failing:
            raise StorageError(f"disk full while writing {sensor_name}")
        super().insert_reading(sensor_name, timestamp, value)


@pytest.fixture
def config():
    return SensorConfig(
        name="A1",
        location="Rack-A",
        min_value=5.0,
        max_value=55.0,
        smoothing_enabled=True,
        smoothing_window_size=6,
        anomaly_detection_enabled=True,
        anomaly_threshold=0.8,
        warning_threshold=45.0,
        critical_threshold=50.0,
    )


@pytest.fixture
def quiet_config():
    return SensorConfig(
        name="B2",
        location="Rack-B",
        min_value=-2.0,
        max_value=12.0,
        smoothing_enabled=False,
        smoothing_window_size=3,
        anomaly_detection_enabled=False,
        anomaly_threshold=0.4,
        warning_threshold=10.0,
        critical_threshold=11.0,
    )


@pytest.fixture
def scripted():
    return ScriptedRandomSource


@pytest.fixture
def store():
    s = InMemoryReadingStore()
    s.ensure_schema()
    return s


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 1, 15, 12, 0, 0)


@pytest.fixture
def make_sensor():
    def factory(config, fractions=None):
        return Sensor(config, rng=ScriptedRandomSource(fractions))

    return factory
