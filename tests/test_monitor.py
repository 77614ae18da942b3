"""Tests for the reading log orchestrator and the monitoring loop."""

import math
from datetime import datetime

import pytest

from conftest import FailingStore
from sensor_sim.core import AlertLevel
from sensor_sim.monitor import CycleResult, MonitorLoop, ReadingLog, ReadingRecord
from sensor_sim.storage import ActivityLog, StorageError


@pytest.fixture
def activity_log(tmp_path):
    return ActivityLog(str(tmp_path / "activity.log"))


@pytest.fixture
def reading_log(store, activity_log, fixed_clock):
    return ReadingLog(store, activity_log, clock=fixed_clock)


class TestTickSensor:
    def test_record_fields(self, reading_log, store, config, make_sensor):
        sensor = make_sensor(config, [0.5])
        sensor.start()

        record = reading_log.tick_sensor(sensor)

        assert record.sensor_name == "A1"
        assert record.location == "Rack-A"
        assert record.timestamp == datetime(2026, 1, 15, 12, 0, 0)
        assert record.reading == pytest.approx(30.0)
        assert record.smoothed == pytest.approx(30.0)
        assert not record.is_anomaly
        assert record.classification is AlertLevel.NORMAL
        assert record.message == "A1 at Rack-A is normal."

    def test_reading_is_persisted(self, reading_log, store, config, make_sensor):
        sensor = make_sensor(config, [0.5])
        sensor.start()

        reading_log.tick_sensor(sensor)

        assert store.readings("A1") == [("2026-01-15T12:00:00", pytest.approx(30.0))]

    def test_inactive_sensor_yields_nothing(self, reading_log, store, activity_log, config, make_sensor):
        sensor = make_sensor(config)

        assert reading_log.tick_sensor(sensor) is None
        assert store.reading_count("A1") == 0
        assert activity_log.lines() == []

    def test_anomaly_against_stored_baseline(self, reading_log, store, config, make_sensor):
        for _ in range(10):
            store.insert_reading("A1", "2026-01-15T11:59:00", 20.0)
        # 5 + 0.33 * 50 = 21.5; baseline includes it: (9 * 20 + 21.5) / 10
        sensor = make_sensor(config, [0.33])
        sensor.start()

        record = reading_log.tick_sensor(sensor)

        assert record.reading == pytest.approx(21.5)
        assert record.is_anomaly

    def test_close_reading_is_not_anomaly(self, reading_log, store, config, make_sensor):
        for _ in range(10):
            store.insert_reading("A1", "2026-01-15T11:59:00", 20.0)
        sensor = make_sensor(config, [0.31])
        sensor.start()

        record = reading_log.tick_sensor(sensor)

        assert record.reading == pytest.approx(20.5)
        assert not record.is_anomaly

    def test_critical_classification(self, reading_log, config, make_sensor):
        sensor = make_sensor(config, [1.0])
        sensor.start()

        record = reading_log.tick_sensor(sensor)

        assert record.reading == pytest.approx(55.0)
        assert record.classification is AlertLevel.CRITICAL
        assert record.message.startswith("CRITICAL!")

    def test_smoothed_tracks_window(self, reading_log, config, make_sensor):
        sensor = make_sensor(config, [0.5, 1.0, 0.5, 1.0, 0.5])
        sensor.start()

        first = reading_log.tick_sensor(sensor)
        second = reading_log.tick_sensor(sensor)
        third = reading_log.tick_sensor(sensor)

        assert third.smoothed == pytest.approx(
            (first.reading + second.reading + third.reading) / 3
        )

    def test_activity_log_line(self, reading_log, activity_log, store, config, make_sensor):
        for _ in range(10):
            store.insert_reading("A1", "t", 20.0)
        sensor = make_sensor(config, [0.5])
        sensor.start()

        reading_log.tick_sensor(sensor)

        assert activity_log.lines() == ["A1 | 12:00:00 | 30.0°C  >> ANOMALY"]

    def test_storage_failure_propagates(self, activity_log, fixed_clock, config, make_sensor):
        log = ReadingLog(FailingStore(["A1"]), activity_log, clock=fixed_clock)
        sensor = make_sensor(config)
        sensor.start()

        with pytest.raises(StorageError):
            log.tick_sensor(sensor)
        assert activity_log.lines() == []

    def test_works_without_activity_log(self, store, fixed_clock, config, make_sensor):
        log = ReadingLog(store, clock=fixed_clock)
        sensor = make_sensor(config)
        sensor.start()

        assert log.tick_sensor(sensor) is not None


class TestRunCycle:
    def test_failure_is_isolated(self, activity_log, fixed_clock, config, quiet_config, make_sensor):
        failing = FailingStore(["A1"])
        log = ReadingLog(failing, activity_log, clock=fixed_clock)
        a1 = make_sensor(config)
        b2 = make_sensor(quiet_config)
        a1.start()
        b2.start()

        result = log.run_cycle([a1, b2])

        assert not result.ok
        assert list(result.failures) == ["A1"]
        assert [r.sensor_name for r in result.records] == ["B2"]
        assert failing.reading_count("B2") == 1

    def test_inactive_sensors_are_skipped(self, reading_log, config, quiet_config, make_sensor):
        a1 = make_sensor(config)
        b2 = make_sensor(quiet_config)
        a1.start()

        result = reading_log.run_cycle([a1, b2])

        assert result.ok
        assert result.skipped == ["B2"]
        assert len(result.records) == 1

    def test_alerts(self, config):
        def record(level, anomaly):
            return ReadingRecord("A1", "Rack-A", datetime(2026, 1, 1), 1.0, 1.0, anomaly, level)

        result = CycleResult(
            records=[
                record(AlertLevel.NORMAL, False),
                record(AlertLevel.WARNING, False),
                record(AlertLevel.NORMAL, True),
            ]
        )

        assert len(result.alerts()) == 2


class TestShutdownSensor:
    def test_full_cleanup(self, reading_log, store, activity_log, config, quiet_config, make_sensor):
        a1 = make_sensor(config)
        b2 = make_sensor(quiet_config)
        a1.start()
        b2.start()
        for _ in range(3):
            reading_log.run_cycle([a1, b2])

        assert reading_log.shutdown_sensor(a1, reset=True, clear_logs=True, clear_db=True)

        assert not a1.is_active
        assert a1.state.current_temperature is None
        assert store.reading_count("A1") == 0
        assert store.reading_count("B2") == 3
        assert all("A1" not in line for line in activity_log.lines())
        assert len(activity_log.lines()) == 3

    def test_plain_shutdown_keeps_data(self, reading_log, store, config, make_sensor):
        sensor = make_sensor(config)
        sensor.start()
        reading_log.tick_sensor(sensor)

        reading_log.shutdown_sensor(sensor)

        assert store.reading_count("A1") == 1
        assert sensor.state.current_temperature is not None

    def test_already_inactive(self, reading_log, store, config, make_sensor):
        store.insert_reading("A1", "t", 1.0)
        sensor = make_sensor(config)

        assert not reading_log.shutdown_sensor(sensor, clear_db=True)
        assert store.reading_count("A1") == 1


class TestMonitorLoop:
    def test_runs_max_cycles(self, reading_log, store, config, make_sensor):
        sensor = make_sensor(config)
        sensor.start()
        loop = MonitorLoop(reading_log, [sensor], interval=0.0)

        assert loop.run(max_cycles=3) == 3
        assert store.reading_count("A1") == 3
        assert loop.cycle_count == 3

    def test_stop_before_run(self, reading_log, config, make_sensor):
        sensor = make_sensor(config)
        sensor.start()
        loop = MonitorLoop(reading_log, [sensor], interval=0.0)
        loop.stop()

        assert loop.run(max_cycles=5) == 0
        assert loop.stop_requested

    def test_stop_completes_current_cycle(self, reading_log, store, config, quiet_config, make_sensor):
        sensors = [make_sensor(config), make_sensor(quiet_config)]
        for s in sensors:
            s.start()
        seen = []

        def on_cycle(n, result):
            seen.append(len(result.records))
            if n == 2:
                loop.stop()

        loop = MonitorLoop(reading_log, sensors, interval=0.0, on_cycle=on_cycle)

        assert loop.run() == 2
        assert seen == [2, 2]
        assert store.reading_count("A1") == store.reading_count("B2") == 2

    def test_failures_do_not_stop_loop(self, activity_log, fixed_clock, config, quiet_config, make_sensor):
        failing = FailingStore(["A1"])
        log = ReadingLog(failing, activity_log, clock=fixed_clock)
        sensors = [make_sensor(config), make_sensor(quiet_config)]
        for s in sensors:
            s.start()

        assert MonitorLoop(log, sensors, interval=0.0).run(max_cycles=4) == 4
        assert failing.reading_count("B2") == 4

    def test_interval_paces_cycles(self, reading_log, config, make_sensor, monkeypatch):
        sensor = make_sensor(config)
        sensor.start()
        loop = MonitorLoop(reading_log, [sensor], interval=0.5)
        waits = []
        monkeypatch.setattr(loop._stop_requested, "wait", lambda t: waits.append(t))

        loop.run(max_cycles=3)

        # no wait after the final cycle
        assert len(waits) == 2
        assert all(0.0 < w <= 0.5 for w in waits)

    def test_negative_interval(self, reading_log):
        with pytest.raises(ValueError):
            MonitorLoop(reading_log, [], interval=-1.0)

    def test_record_reading_not_nan(self, reading_log, config, make_sensor):
        sensor = make_sensor(config)
        sensor.start()
        results = []
        MonitorLoop(reading_log, [sensor], interval=0.0, on_cycle=lambda n, r: results.append(r)).run(
            max_cycles=2
        )
        assert all(not math.isnan(r.records[0].reading) for r in results)
