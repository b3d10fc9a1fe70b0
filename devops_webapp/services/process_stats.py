# =============================================================================
# DevOps Web App - Process Statistics Service
# =============================================================================
"""
Process statistics for the health and metrics endpoints.

Wraps psutil so route handlers get plain Pydantic snapshots of uptime,
memory and CPU usage for the running process.
"""

import os
import time
from functools import lru_cache
from typing import Optional

import psutil
import structlog

from ..models import CpuSnapshot, MemorySnapshot


logger = structlog.get_logger(__name__)


class ProcessStats:
    """
    Read-only view of the current process's resource usage.

    Attributes:
        pid: Operating system process identifier
        started_at: Process creation time (epoch seconds)
    """

    def __init__(self, process: Optional[psutil.Process] = None) -> None:
        self._process = process or psutil.Process(os.getpid())
        self.pid = self._process.pid
        self.started_at = self._process.create_time()

        logger.debug("process_stats_initialized", pid=self.pid)

    def uptime(self) -> float:
        """Seconds elapsed since the process started."""
        return round(max(0.0, time.time() - self.started_at), 3)

    def memory(self) -> MemorySnapshot:
        info = self._process.memory_info()
        return MemorySnapshot(rss=info.rss, vms=info.vms)

    def cpu(self) -> CpuSnapshot:
        times = self._process.cpu_times()
        return CpuSnapshot(user=times.user, system=times.system)


@lru_cache
def get_process_stats() -> ProcessStats:
    """
    Get cached process statistics reader.

    Returns:
        ProcessStats: Reader bound to the current process
    """
    return ProcessStats()
