"""
Simulation Engine Module
========================

Advances one sensor by one tick.

Normal operation is a bounded random walk: a uniform drift whose amplitude
(the noise level) itself performs a bounded random walk, so quiet and
volatile stretches alternate.

Fault operation is deterministic and phase-based. Once a fault is
injected the temperature follows an exponential runaway from the last
normal reading, capped at a ceiling, then cools back towards that
baseline and finally stabilizes:

    tick:   1 ............ 40 | 41 ........ 50 | 51
    phase:  SPIKE (exp growth)| COOLING (10%)  | STABILIZED

No random draws are made while a fault is active, so fault sequences are
exactly reproducible.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np

from ..sensors.state import (
    SensorConfig,
    SensorState,
    MIN_NOISE_LEVEL,
    MAX_NOISE_LEVEL,
)
from .random_source import RandomSource

logger = logging.getLogger(__name__)

# Volatility random-walk step
NOISE_WALK_STEP = 0.1

# Tolerance for the accumulated cooling progress (0.1 * 10 != 1.0 in floats)
_PROGRESS_EPS = 1e-9


class FaultPhase(Enum):
    """Where a sensor is in the fault lifecycle."""

    NONE = "none"
    SPIKE = "spike"
    COOLING = "cooling"


@dataclass(frozen=True)
class FaultProfile:
    """Fixed constants of the fault model."""

    duration_ticks: int = 50  # Total fault length, cooldown included
    cooldown_ticks: int = 10  # Last ticks of the fault spent cooling
    growth_rate: float = 0.1  # Exponent rate of the spike
    cooling_rate: float = 0.1  # Fraction of remaining gap closed per tick
    ceiling: float = 50.0  # Hard cap while spiking

    def __post_init__(self):
        if self.duration_ticks < 1:
            raise ValueError(f"duration_ticks must be >= 1, got {self.duration_ticks}")
        if not 0 <= self.cooldown_ticks <= self.duration_ticks:
            raise ValueError(
                f"cooldown_ticks must be in [0, {self.duration_ticks}], "
                f"got {self.cooldown_ticks}"
            )
        if not 0.0 < self.cooling_rate <= 1.0:
            raise ValueError(f"cooling_rate must be in (0, 1], got {self.cooling_rate}")

    @property
    def cooling_starts_after(self) -> int:
        return self.duration_ticks - self.cooldown_ticks


class SimulationEngine:
    """
    Stateless stepping logic; all state lives in SensorState.

    Typical Use:
    >>> engine = SimulationEngine()
    >>> state = SensorState.for_config(config)
    >>> state.active = True
    >>> value = engine.tick(state, config, NumpyRandomSource(seed=1))
    """

    def __init__(self, profile: FaultProfile = FaultProfile()):
        self.profile = profile

    def tick(self, state: SensorState, config: SensorConfig, rng: RandomSource) -> float:
        """
        Produce the next reading.

        Args:
            state: Sensor state, mutated in place
            config: Sensor operating parameters
            rng: Random source for drift and the initial draw

        Returns:
            New temperature, or NaN if the sensor is inactive
        """
        if not state.active:
            return float("nan")

        if not state.has_temperature:
            state.current_temperature = rng.uniform(config.min_value, config.max_value)
            state.fault_start_temperature = state.current_temperature
        elif state.fault_active:
            self._fault_behaviour(state, config)
        else:
            self._normal_fluctuation(state, config, rng)

        state.push_reading(state.current_temperature)
        return state.current_temperature

    def inject_fault(self, state: SensorState) -> None:
        """Start a fault; the spike begins on the next tick."""
        state.fault_active = True
        state.fault_tick_count = 0

    def fault_phase(self, state: SensorState) -> FaultPhase:
        if not state.fault_active:
            return FaultPhase.NONE
        if state.fault_tick_count > self.profile.cooling_starts_after:
            return FaultPhase.COOLING
        return FaultPhase.SPIKE

    def smooth(self, state: SensorState, config: SensorConfig) -> float:
        """
        Simple moving average over the recent-reading window.

        Returns NaN before the first reading, and the latest raw reading
        when smoothing is disabled.
        """
        if not state.recent_readings:
            return float("nan")
        if not config.smoothing_enabled:
            return state.recent_readings[-1]
        return float(np.mean(state.recent_readings))

    def _normal_fluctuation(
        self, state: SensorState, config: SensorConfig, rng: RandomSource
    ) -> None:
        drift = rng.uniform(-state.noise_level, state.noise_level)
        temperature = state.current_temperature + drift
        state.current_temperature = min(max(temperature, config.min_value), config.max_value)

        noise = state.noise_level + rng.uniform(-NOISE_WALK_STEP, NOISE_WALK_STEP)
        state.noise_level = min(max(noise, MIN_NOISE_LEVEL), MAX_NOISE_LEVEL)

        # Baseline a future fault spikes from, and cools back to
        state.fault_start_temperature = state.current_temperature

    def _fault_behaviour(self, state: SensorState, config: SensorConfig) -> None:
        profile = self.profile
        state.fault_tick_count += 1
        t = state.fault_tick_count / 10.0

        if state.fault_tick_count > profile.duration_ticks:
            state.fault_active = False
            state.fault_tick_count = 0
            state.cooling_progress = 0.0
            logger.info(f"{config.name} fault has stabilized")
            return

        if state.fault_tick_count > profile.cooling_starts_after:
            if state.cooling_progress < 1.0:
                gap = state.fault_start_temperature - state.current_temperature
                state.current_temperature += gap * profile.cooling_rate
                state.cooling_progress += profile.cooling_rate

                if state.cooling_progress >= 1.0 - _PROGRESS_EPS:
                    state.cooling_progress = 1.0
                    state.current_temperature = state.fault_start_temperature
            return

        spiked = state.fault_start_temperature * math.exp(profile.growth_rate * t)
        state.current_temperature = min(spiked, profile.ceiling)
