"""
Sensor State Module
===================

Value types shared by the simulation, detection and storage layers:

- SensorConfig: immutable operating parameters, loaded once
- SensorState: per-sensor mutable simulation state
- Reading: one timestamped measurement, the unit persisted and logged

Security Features:
- Bounded memory (recent readings kept in a deque with maxlen)
- Explicit validation (no asserts)

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

DEFAULT_NOISE_LEVEL = 0.05
MIN_NOISE_LEVEL = 0.02
MAX_NOISE_LEVEL = 0.3


@dataclass(frozen=True)
class SensorConfig:
    """
    Operating parameters for one sensor.

    Bounds are inclusive. critical_threshold > warning_threshold by
    convention only; nothing enforces it.
    """

    name: str
    location: str
    min_value: float
    max_value: float
    smoothing_enabled: bool = False
    smoothing_window_size: int = 5
    anomaly_detection_enabled: bool = False
    anomaly_threshold: float = 1.0
    warning_threshold: float = 30.0
    critical_threshold: float = 40.0

    @property
    def window_capacity(self) -> int:
        """Smoothing window size, floored at 1."""
        return max(1, int(self.smoothing_window_size))

    def validate(self) -> None:
        """Raise ValueError if the configuration is unusable."""
        if not isinstance(self.name, str) or len(self.name) == 0:
            raise ValueError("Sensor name must be non-empty string")
        for label, value in (
            ("min_value", self.min_value),
            ("max_value", self.max_value),
            ("anomaly_threshold", self.anomaly_threshold),
            ("warning_threshold", self.warning_threshold),
            ("critical_threshold", self.critical_threshold),
        ):
            if not math.isfinite(value):
                raise ValueError(f"{label} must be finite, got {value}")
        if self.min_value >= self.max_value:
            raise ValueError(
                f"Invalid range for {self.name}: "
                f"min_value {self.min_value} >= max_value {self.max_value}"
            )
        if self.anomaly_threshold < 0:
            raise ValueError(
                f"Anomaly threshold must be non-negative, got {self.anomaly_threshold}"
            )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "location": self.location,
            "min_value": self.min_value,
            "max_value": self.max_value,
            "smoothing_enabled": self.smoothing_enabled,
            "smoothing_window_size": self.smoothing_window_size,
            "anomaly_detection_enabled": self.anomaly_detection_enabled,
            "anomaly_threshold": self.anomaly_threshold,
            "warning_threshold": self.warning_threshold,
            "critical_threshold": self.critical_threshold,
        }


@dataclass
class SensorState:
    """
    Mutable simulation state for one sensor.

    Owned exclusively by that sensor's tick; never shared between sensors.
    current_temperature is None until the first active tick.
    """

    window_size: int = 1
    active: bool = False
    current_temperature: Optional[float] = None
    noise_level: float = DEFAULT_NOISE_LEVEL
    fault_active: bool = False
    fault_start_temperature: float = 0.0
    fault_tick_count: int = 0
    cooling_progress: float = 0.0
    recent_readings: Deque[float] = field(init=False, repr=False)

    def __post_init__(self):
        self.window_size = max(1, int(self.window_size))
        self.recent_readings = deque(maxlen=self.window_size)

    @classmethod
    def for_config(cls, config: SensorConfig) -> "SensorState":
        return cls(window_size=config.window_capacity)

    @property
    def has_temperature(self) -> bool:
        return self.current_temperature is not None

    def push_reading(self, value: float) -> None:
        """Record a reading; the oldest one is evicted when the window is full."""
        self.recent_readings.append(value)

    def reset(self) -> None:
        """
        Return to the freshly-created state.

        Clears the reading window, unsets the temperature and restores the
        default noise level. Fault progress is cleared as well.
        """
        self.recent_readings.clear()
        self.current_temperature = None
        self.noise_level = DEFAULT_NOISE_LEVEL
        self.fault_active = False
        self.fault_start_temperature = 0.0
        self.fault_tick_count = 0
        self.cooling_progress = 0.0


@dataclass(frozen=True)
class Reading:
    """Single persisted measurement."""

    sensor_name: str
    timestamp: str  # ISO-8601
    value: float
