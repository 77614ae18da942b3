"""Tests for threshold classification and anomaly detection."""

import dataclasses

import pytest

from sensor_sim.core import AlertLevel, AnomalyDetector, classify, threshold_message


class TestClassify:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (20.0, AlertLevel.NORMAL),
            (45.0, AlertLevel.NORMAL),
            (45.0001, AlertLevel.WARNING),
            (50.0, AlertLevel.WARNING),
            (50.0001, AlertLevel.CRITICAL),
            (80.0, AlertLevel.CRITICAL),
        ],
    )
    def test_strict_thresholds(self, config, value, expected):
        assert classify(value, config) is expected

    def test_critical_equality_is_not_critical(self, config):
        assert classify(config.critical_threshold, config) is not AlertLevel.CRITICAL

    def test_inverted_thresholds_check_critical_first(self, config):
        inverted = dataclasses.replace(config, warning_threshold=50.0, critical_threshold=45.0)
        assert classify(47.0, inverted) is AlertLevel.CRITICAL


class TestThresholdMessage:
    def test_messages(self, config):
        assert threshold_message(config, AlertLevel.CRITICAL) == (
            "CRITICAL! A1 at Rack-A exceeded 50.0°C."
        )
        assert threshold_message(config, AlertLevel.WARNING) == (
            "Warning! A1 at Rack-A passed 45.0°C."
        )
        assert threshold_message(config, AlertLevel.NORMAL) == "A1 at Rack-A is normal."


class TestAnomalyDetect:
    def test_deviation_above_threshold(self, config):
        assert AnomalyDetector.detect(21.5, config, 20.0)

    def test_deviation_below_threshold(self, config):
        assert not AnomalyDetector.detect(20.5, config, 20.0)

    def test_deviation_equal_threshold_is_not_anomaly(self, config):
        half = dataclasses.replace(config, anomaly_threshold=0.5)
        assert not AnomalyDetector.detect(20.5, half, 20.0)

    def test_negative_deviation(self, config):
        assert AnomalyDetector.detect(18.0, config, 20.0)

    @pytest.mark.parametrize("average", [None, 0.0, float("nan")])
    def test_missing_or_zero_baseline_never_flags(self, config, average):
        assert not AnomalyDetector.detect(1000.0, config, average)

    def test_disabled_never_flags(self, quiet_config):
        assert not AnomalyDetector.detect(1000.0, quiet_config, 5.0)


class TestAnomalyCheck:
    def test_uses_store_average(self, config, store):
        for _ in range(10):
            store.insert_reading("A1", "2026-01-01T00:00:00", 20.0)
        detector = AnomalyDetector(store)

        assert detector.check(21.5, config)
        assert not detector.check(20.5, config)

    def test_cold_start_store(self, config, store):
        assert not AnomalyDetector(store).check(40.0, config)

    def test_history_limit(self, config, store):
        for _ in range(5):
            store.insert_reading("A1", "t", 40.0)
        for _ in range(3):
            store.insert_reading("A1", "t", 20.0)

        assert not AnomalyDetector(store, history_limit=3).check(20.5, config)
        assert AnomalyDetector(store, history_limit=8).check(20.5, config)

    def test_disabled_does_not_need_store(self, quiet_config):
        assert not AnomalyDetector().check(1000.0, quiet_config)

    def test_enabled_without_store(self, config):
        with pytest.raises(RuntimeError):
            AnomalyDetector().check(20.0, config)

    def test_invalid_history_limit(self):
        with pytest.raises(ValueError):
            AnomalyDetector(history_limit=0)
