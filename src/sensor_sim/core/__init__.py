"""
Simulation Core Package
=======================

Reading generation and alerting logic.

This package provides:
- RandomSource: injected uniform random generator
- SimulationEngine: drift, fault spike/cooldown and window smoothing
- classify / AnomalyDetector: threshold and statistical alerting

USAGE EXAMPLE
=============

```python
from sensor_sim.core import SimulationEngine, NumpyRandomSource, classify
from sensor_sim.sensors import SensorConfig, SensorState

config = SensorConfig(name="A1", location="Rack-A", min_value=5, max_value=55)
state = SensorState.for_config(config)
state.active = True

engine = SimulationEngine()
rng = NumpyRandomSource(seed=1)
for _ in range(10):
    value = engine.tick(state, config, rng)

level = classify(value, config)
```

WHAT THIS PACKAGE DOES NOT DO:
- NO storage or file I/O
- NO configuration parsing
- NO output formatting

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

from .random_source import RandomSource, NumpyRandomSource
from .engine import SimulationEngine, FaultProfile, FaultPhase
from .detection import (
    AlertLevel,
    AnomalyDetector,
    classify,
    threshold_message,
    DEFAULT_HISTORY_LIMIT,
)

__all__ = [
    "RandomSource",
    "NumpyRandomSource",
    "SimulationEngine",
    "FaultProfile",
    "FaultPhase",
    "AlertLevel",
    "AnomalyDetector",
    "classify",
    "threshold_message",
    "DEFAULT_HISTORY_LIMIT",
]
