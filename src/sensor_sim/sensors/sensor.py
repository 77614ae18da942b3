"""
Sensor Module
=============

Simulated environmental sensor: a SensorConfig, the SensorState it owns,
and the engine and random source that drive it.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import math
from typing import Optional

from ..core.engine import SimulationEngine, FaultPhase
from ..core.random_source import RandomSource, NumpyRandomSource
from .state import SensorConfig, SensorState

logger = logging.getLogger(__name__)


class Sensor:
    """
    Simulated temperature sensor.

    Typical Use:
    >>> sensor = Sensor(config, rng=NumpyRandomSource(seed=7))
    >>> sensor.start()
    >>> value = sensor.simulate()
    >>> smoothed = sensor.smooth()
    """

    def __init__(
        self,
        config: SensorConfig,
        rng: Optional[RandomSource] = None,
        engine: Optional[SimulationEngine] = None,
    ):
        config.validate()
        self.config = config
        self.rng = rng or NumpyRandomSource()
        self.engine = engine or SimulationEngine()
        self.state = SensorState.for_config(config)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def location(self) -> str:
        return self.config.location

    @property
    def is_active(self) -> bool:
        return self.state.active

    @property
    def fault_phase(self) -> FaultPhase:
        return self.engine.fault_phase(self.state)

    def start(self) -> None:
        """Activate the sensor so it produces readings."""
        self.state.active = True
        logger.info(f"{self.name} activated at {self.location}")

    def inject_fault(self) -> None:
        """Trigger a fault; the temperature spikes from the next reading on."""
        self.engine.inject_fault(self.state)
        logger.info(f"Fault injected on {self.name}. Temperature rising abnormally")

    def simulate(self) -> float:
        """Next reading, or NaN while inactive."""
        return self.engine.tick(self.state, self.config, self.rng)

    def smooth(self) -> float:
        return self.engine.smooth(self.state, self.config)

    def validate(self, value: float) -> bool:
        """Check a reading lies inside the operating bounds."""
        if math.isnan(value):
            return False
        return self.config.min_value <= value <= self.config.max_value

    def shutdown(self, reset: bool = False) -> bool:
        """
        Deactivate the sensor.

        Args:
            reset: Also clear readings, unset the temperature and restore
                the default noise level

        Returns:
            False if the sensor was already inactive (nothing done)
        """
        if not self.state.active:
            logger.info(f"{self.name} already inactive")
            return False

        self.state.active = False
        logger.info(f"{self.name} shut down")

        if reset:
            self.state.reset()
        return True

    def __repr__(self) -> str:
        temperature = self.state.current_temperature
        shown = "unset" if temperature is None else f"{temperature:.3f}"
        return (
            f"{self.__class__.__name__}(name='{self.name}', "
            f"active={self.state.active}, "
            f"temperature={shown}, "
            f"fault={self.fault_phase.value})"
        )
