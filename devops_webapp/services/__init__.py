# =============================================================================
# DevOps Web App - Services Package
# =============================================================================
"""Service layer for process introspection."""

from .process_stats import ProcessStats, get_process_stats

__all__ = ["ProcessStats", "get_process_stats"]
