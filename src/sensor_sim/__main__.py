"""
Main Monitoring Orchestrator
============================

Entry point for the sensor fleet simulation.

Author: Guilherme F. G. Santos
Date: January 2026
"""

import argparse
import logging
import signal
import sys
from contextlib import suppress
from typing import List, Optional

from .config import ConfigError, default_config_path, load_sensor_configs
from .core import AlertLevel, NumpyRandomSource, AnomalyDetector
from .monitor import CycleResult, MonitorLoop, ReadingLog
from .sensors import create_sensor_fleet
from .storage import ActivityLog, SqliteReadingStore, StorageError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Environmental Sensor Fleet Simulation")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Sensor configuration JSON (default: $SENSOR_SIM_CONFIG or sensor_config.json)",
    )
    parser.add_argument(
        "--db", type=str, default="SensorData.db", help="SQLite database path"
    )
    parser.add_argument(
        "--log-file", type=str, default="SensorActivity.log", help="Activity log path"
    )
    parser.add_argument(
        "--interval", type=float, default=1.0, help="Delay between cycles [seconds]"
    )
    parser.add_argument(
        "--cycles", type=int, default=None, help="Stop after this many cycles"
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--history-limit",
        type=int,
        default=10,
        help="Stored readings averaged for the anomaly baseline",
    )
    parser.add_argument(
        "--inject-fault",
        action="store_true",
        help="Inject a fault on every sensor after start-up",
    )
    parser.add_argument(
        "--fresh",
        action="store_true",
        help="Clear stored readings and the activity log before starting",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def report_cycle(cycle: int, result: CycleResult) -> None:
    for record in result.records:
        line = record.format_line()
        if record.classification is AlertLevel.NORMAL:
            logger.info(line)
        else:
            logger.warning(f"{line} | {record.message}")
    if result.failures:
        logger.error(f"Cycle {cycle}: {len(result.failures)} sensor(s) failed to store")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.history_limit < 1:
        parser.error(f"--history-limit must be at least 1, got {args.history_limit}")
    if args.interval < 0:
        parser.error(f"--interval must be non-negative, got {args.interval}")
    if args.cycles is not None and args.cycles < 0:
        parser.error(f"--cycles must be non-negative, got {args.cycles}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger.info("=" * 70)
    logger.info("ENVIRONMENTAL SENSOR FLEET SIMULATION")
    logger.info("=" * 70)

    # ========================================================================
    # PHASE 1: Load configuration
    # ========================================================================
    config_path = args.config or default_config_path()
    logger.info(f"[PHASE 1] Loading sensor configuration from {config_path}")

    try:
        configs = load_sensor_configs(config_path)
    except ConfigError as e:
        logger.error(f"Configuration error ({e.kind.value}): {e.message}")
        return 1

    for c in configs:
        logger.info(f"  {c.name} @ {c.location}: {c.min_value}°C to {c.max_value}°C")

    # ========================================================================
    # PHASE 2: Open storage
    # ========================================================================
    logger.info(f"[PHASE 2] Opening reading store {args.db}")

    try:
        store = SqliteReadingStore(args.db)
        if args.fresh:
            # Schema must exist before it can be cleared
            store.ensure_schema()
            store.clear_all()
        store.ensure_schema()
    except StorageError as e:
        logger.error(f"Storage initialization failed: {e}")
        return 1

    activity_log = ActivityLog(args.log_file)
    if args.fresh:
        activity_log.clear()

    # ========================================================================
    # PHASE 3: Start sensors
    # ========================================================================
    logger.info("[PHASE 3] Starting sensors...")

    rng = NumpyRandomSource(seed=args.seed)
    sensors = create_sensor_fleet(configs, rng=rng)
    for sensor in sensors.values():
        sensor.start()

    if args.inject_fault:
        logger.info("Fault injection enabled")
        for sensor in sensors.values():
            sensor.inject_fault()

    # ========================================================================
    # PHASE 4: Monitoring loop
    # ========================================================================
    reading_log = ReadingLog(
        store,
        activity_log,
        detector=AnomalyDetector(store, history_limit=args.history_limit),
    )
    loop = MonitorLoop(
        reading_log, sensors.values(), interval=args.interval, on_cycle=report_cycle
    )

    def signal_handler(sig, frame):
        logger.info("Shutdown signal received. Stopping after current cycle...")
        loop.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    logger.info("[PHASE 4] Monitoring... press Ctrl+C to stop")

    exit_code = 0
    try:
        cycles = loop.run(max_cycles=args.cycles)
        logger.info(f"Monitoring stopped after {cycles} cycle(s)")
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
    except Exception as e:
        logger.error(f"Monitoring error: {type(e).__name__}: {e}")
        exit_code = 1
    finally:
        logger.info("Shutting down...")
        for sensor in sensors.values():
            sensor.shutdown()
        with suppress(StorageError):
            store.close()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
