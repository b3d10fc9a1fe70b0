# =============================================================================
# DevOps Web App - Package Initialization
# =============================================================================
"""
DevOps Web App Service

A small HTTP service exposing health, readiness and metrics probes and a
validated data ingestion endpoint behind standard request policies.
"""

__version__ = "1.0.0"
