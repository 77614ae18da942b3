"""
Activity Log
============

Append-only, line-oriented text log of readings.

One line per reading per sensor per tick. Lines can be removed by
substring (used to forget a sensor on shutdown).

Author: Guilherme F. G. Santos
Date: January 2026
License: MIT
"""

import logging
import os
import threading
from typing import List

logger = logging.getLogger(__name__)


class ActivityLog:
    """Plain-text reading log; one lock serializes every file access."""

    def __init__(self, path: str = "SensorActivity.log"):
        self.path = path
        self._lock = threading.Lock()

    def append_line(self, text: str) -> None:
        if "\n" in text or "\r" in text:
            raise ValueError("Activity log lines must not contain line breaks")
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(text + "\n")

    def lines(self) -> List[str]:
        with self._lock:
            if not os.path.exists(self.path):
                return []
            with open(self.path, "r", encoding="utf-8") as f:
                return f.read().splitlines()

    def clear_lines_containing(self, substring: str) -> int:
        """Drop every line containing `substring`; returns how many went."""
        with self._lock:
            if not os.path.exists(self.path):
                return 0
            with open(self.path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()
            kept = [line for line in lines if substring not in line]
            with open(self.path, "w", encoding="utf-8") as f:
                f.writelines(line + "\n" for line in kept)

        removed = len(lines) - len(kept)
        logger.debug(f"Removed {removed} activity log lines containing '{substring}'")
        return removed

    def clear(self) -> None:
        """Truncate the log."""
        with self._lock:
            with open(self.path, "w", encoding="utf-8"):
                pass
