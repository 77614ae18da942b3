"""
Detection Module
================

Alerting rules applied to every reading:

- classify: maps a value to NORMAL / WARNING / CRITICAL (strict '>')
- AnomalyDetector: flags readings far from the recent stored average

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import math
from enum import Enum
from typing import Optional

from ..sensors.state import SensorConfig

# Number of most recent stored readings averaged for the anomaly baseline
DEFAULT_HISTORY_LIMIT = 10


class AlertLevel(Enum):
    """Threshold classification of a reading."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


def classify(value: float, config: SensorConfig) -> AlertLevel:
    """Equality to a threshold never counts as crossing it."""
    if value > config.critical_threshold:
        return AlertLevel.CRITICAL
    if value > config.warning_threshold:
        return AlertLevel.WARNING
    return AlertLevel.NORMAL


def threshold_message(config: SensorConfig, level: AlertLevel) -> str:
    """Human-readable alert text for a classification."""
    if level is AlertLevel.CRITICAL:
        return (
            f"CRITICAL! {config.name} at {config.location} "
            f"exceeded {config.critical_threshold}°C."
        )
    if level is AlertLevel.WARNING:
        return (
            f"Warning! {config.name} at {config.location} "
            f"passed {config.warning_threshold}°C."
        )
    return f"{config.name} at {config.location} is normal."


class AnomalyDetector:
    """
    Compares a reading against the mean of the most recent stored readings.

    A zero or missing baseline never flags: a cold-start store and a
    genuine 0.0 average are indistinguishable here.
    """

    def __init__(self, store=None, history_limit: int = DEFAULT_HISTORY_LIMIT):
        if history_limit < 1:
            raise ValueError(f"History limit must be positive, got {history_limit}")
        self.store = store
        self.history_limit = history_limit

    @staticmethod
    def detect(
        reading: float, config: SensorConfig, historical_average: Optional[float]
    ) -> bool:
        """
        Args:
            reading: Value to test
            config: Sensor parameters (enable flag and threshold)
            historical_average: Mean of recent stored readings, None if none

        Returns:
            True iff the reading deviates from the average by more than
            the configured anomaly threshold
        """
        if not config.anomaly_detection_enabled:
            return False
        if historical_average is None or math.isnan(historical_average):
            return False
        if historical_average == 0:
            return False
        return abs(reading - historical_average) > config.anomaly_threshold

    def check(self, reading: float, config: SensorConfig) -> bool:
        """detect() against the baseline held by the attached store."""
        if not config.anomaly_detection_enabled:
            return False
        if self.store is None:
            raise RuntimeError("AnomalyDetector has no store attached")
        average = self.store.recent_average(config.name, self.history_limit)
        return self.detect(reading, config, average)
