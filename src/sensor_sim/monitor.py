"""
Monitor Module
==============

Runs monitoring ticks across the sensor fleet.

Per sensor, one tick is:
1. Advance the simulation (Sensor.simulate)
2. Persist (name, timestamp, value) to the reading store
3. Compute the smoothed value
4. Flag anomalies against the stored recent average
5. Classify against warning/critical thresholds
6. Append the formatted record to the activity log

Storage failures are not retried here. Inside a cycle they are isolated
per sensor: the failing sensor is reported and the rest still tick.

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import math
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from .core.detection import AlertLevel, AnomalyDetector, classify, threshold_message
from .sensors.sensor import Sensor
from .storage.activity_log import ActivityLog
from .storage.base import ReadingStore, StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadingRecord:
    """Outcome of one sensor tick."""

    sensor_name: str
    location: str
    timestamp: datetime
    reading: float
    smoothed: float
    is_anomaly: bool
    classification: AlertLevel
    message: str = ""

    def format_line(self) -> str:
        line = f"{self.sensor_name} | {self.timestamp:%H:%M:%S} | {self.reading:.1f}°C"
        if self.is_anomaly:
            line += "  >> ANOMALY"
        return line

    def to_dict(self) -> dict:
        return {
            "sensor_name": self.sensor_name,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
            "reading": self.reading,
            "smoothed": self.smoothed,
            "is_anomaly": self.is_anomaly,
            "classification": self.classification.value,
        }


@dataclass
class CycleResult:
    """Records produced and sensors that failed during one cycle."""

    records: List[ReadingRecord] = field(default_factory=list)
    failures: Dict[str, StorageError] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def alerts(self) -> List[ReadingRecord]:
        return [
            r
            for r in self.records
            if r.is_anomaly or r.classification is not AlertLevel.NORMAL
        ]


class ReadingLog:
    """
    Orchestrates one monitoring tick per sensor.

    Collaborators are passed in explicitly so tests can substitute
    in-memory fakes.
    """

    def __init__(
        self,
        store: ReadingStore,
        activity_log: Optional[ActivityLog] = None,
        detector: Optional[AnomalyDetector] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.activity_log = activity_log
        self.detector = detector or AnomalyDetector(store)
        if self.detector.store is None:
            self.detector.store = store
        self.clock = clock

    def tick_sensor(self, sensor: Sensor) -> Optional[ReadingRecord]:
        """
        Run one tick for one sensor.

        Returns:
            The record, or None if the sensor produced no reading (inactive)

        Raises:
            StorageError: if persisting or querying the baseline fails
        """
        reading = sensor.simulate()
        if math.isnan(reading):
            return None

        config = sensor.config
        timestamp = self.clock()
        self.store.insert_reading(config.name, timestamp.isoformat(), reading)

        smoothed = sensor.smooth()
        is_anomaly = self.detector.check(reading, config)
        level = classify(reading, config)

        record = ReadingRecord(
            sensor_name=config.name,
            location=config.location,
            timestamp=timestamp,
            reading=reading,
            smoothed=smoothed,
            is_anomaly=is_anomaly,
            classification=level,
            message=threshold_message(config, level),
        )

        if self.activity_log is not None:
            self.activity_log.append_line(record.format_line())
        return record

    def run_cycle(self, sensors: Iterable[Sensor]) -> CycleResult:
        """Tick every sensor once; storage failures are isolated per sensor."""
        result = CycleResult()
        for sensor in sensors:
            try:
                record = self.tick_sensor(sensor)
            except StorageError as e:
                logger.error(f"{sensor.name}: reading not stored ({e})")
                result.failures[sensor.name] = e
                continue

            if record is None:
                result.skipped.append(sensor.name)
            else:
                result.records.append(record)

        logger.debug(
            f"Cycle complete: {len(result.records)} records, "
            f"{len(result.failures)} failures, {len(result.skipped)} inactive"
        )
        return result

    def shutdown_sensor(
        self,
        sensor: Sensor,
        reset: bool = False,
        clear_logs: bool = False,
        clear_db: bool = False,
    ) -> bool:
        """
        Deactivate a sensor and optionally forget it.

        Args:
            sensor: Sensor to shut down
            reset: Reset its simulation state
            clear_logs: Remove its lines from the activity log
            clear_db: Delete its stored readings

        Returns:
            False if the sensor was already inactive (nothing cleared)
        """
        if not sensor.shutdown(reset=reset):
            return False
        if clear_logs and self.activity_log is not None:
            self.activity_log.clear_lines_containing(sensor.name)
        if clear_db:
            self.store.delete_readings(sensor.name)
        return True


class MonitorLoop:
    """
    Fixed-interval monitoring loop.

    stop() is polled once per cycle; a cycle in progress always completes.
    """

    def __init__(
        self,
        reading_log: ReadingLog,
        sensors: Iterable[Sensor],
        interval: float = 1.0,
        on_cycle: Optional[Callable[[int, CycleResult], None]] = None,
    ):
        if interval < 0:
            raise ValueError(f"Interval must be non-negative, got {interval}")
        self.reading_log = reading_log
        self.sensors = list(sensors)
        self.interval = interval
        self.on_cycle = on_cycle
        self.cycle_count = 0
        self._stop_requested = threading.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    def stop(self) -> None:
        self._stop_requested.set()

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Run until stop() or until max_cycles cycles have completed.

        Returns:
            Number of cycles run by this call
        """
        cycles = 0
        while not self._stop_requested.is_set():
            if max_cycles is not None and cycles >= max_cycles:
                break

            cycle_start = time.monotonic()
            result = self.reading_log.run_cycle(self.sensors)
            cycles += 1
            self.cycle_count += 1

            if self.on_cycle is not None:
                self.on_cycle(self.cycle_count, result)

            if max_cycles is not None and cycles >= max_cycles:
                break

            elapsed = time.monotonic() - cycle_start
            sleep_time = max(0.0, self.interval - elapsed)
            if sleep_time > 0:
                self._stop_requested.wait(sleep_time)

        return cycles
