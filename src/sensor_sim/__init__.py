"""
Sensor Fleet Simulator
======================

Simulates a fleet of environmental sensors with drift, injected faults
and recovery, persists readings and raises threshold/anomaly alerts.

Subpackages:
- sensors: configuration, state and the Sensor lifecycle facade
- core: random source, simulation engine, alert detection
- storage: reading stores and the activity log

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Guilherme F. G. Santos"

# sensors before core: the engine imports sensors.state
from .sensors import Sensor, SensorConfig, SensorState, Reading, create_sensor_fleet
from .core import (
    RandomSource,
    NumpyRandomSource,
    SimulationEngine,
    FaultProfile,
    FaultPhase,
    AlertLevel,
    AnomalyDetector,
    classify,
)
from .config import ConfigError, ConfigErrorKind, load_sensor_configs, save_sensor_configs
from .monitor import ReadingLog, ReadingRecord, CycleResult, MonitorLoop
