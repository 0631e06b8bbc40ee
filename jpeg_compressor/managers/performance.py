# managers/performance.py
"""
PerformanceMonitor: checks memory usage and empties the result cache when thresholds are exceeded.
"""
import gc
import logging

import psutil
from PySide6.QtCore import QTimer

from .. import config
from ..cache import get_cache

LOGGER = logging.getLogger(__name__)


class PerformanceMonitor:
    """Monitors memory usage and performs cleanup actions."""
    def __init__(self, parent, *, interval_secs: int = config.MEMORY_CHECK_INTERVAL_SECS):
        self.parent = parent
        self.timer = QTimer(parent)
        self.timer.timeout.connect(self.check_memory)
        self.timer.start(interval_secs * 1000)

    def check_memory(self) -> bool:
        """Return True when a cleanup pass ran."""
        try:
            rss = psutil.Process().memory_info().rss
        except psutil.Error as e:
            LOGGER.warning("Memory check failed: %s", e)
            return False
        if rss <= config.MEMORY_THRESHOLD_BYTES:
            return False
        self._optimize()
        return True

    def stop(self) -> None:
        self.timer.stop()

    def _optimize(self) -> None:
        released = get_cache().clear()
        gc.collect()
        LOGGER.info("PerformanceMonitor: released %d cached bytes", released)
