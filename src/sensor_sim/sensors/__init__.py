"""
Sensors Package
===============

Simulated environmental sensors and their value types.

Available:
- SensorConfig: immutable operating parameters
- SensorState: per-sensor mutable simulation state
- Reading: persisted measurement
- Sensor: lifecycle facade (start, inject fault, simulate, shutdown)

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from typing import Dict, List, Optional

from .state import SensorConfig, SensorState, Reading
from .sensor import Sensor


def create_sensor_fleet(configs: List[SensorConfig], rng=None) -> Dict[str, Sensor]:
    """
    Build one Sensor per configuration, keyed by name.

    Args:
        configs: Loaded sensor configurations (names must be unique)
        rng: Optional RandomSource shared by every sensor

    Returns:
        Dict[str, Sensor]: Named sensors, in configuration order
    """
    sensors: Dict[str, Sensor] = {}
    for config in configs:
        if config.name in sensors:
            raise ValueError(f"Duplicate sensor name: {config.name}")
        sensors[config.name] = Sensor(config, rng=rng)
    return sensors


__all__ = [
    "SensorConfig",
    "SensorState",
    "Reading",
    "Sensor",
    "create_sensor_fleet",
]
