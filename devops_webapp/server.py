# =============================================================================
# DevOps Web App - Server Entry Point
# =============================================================================
"""
Run the application under uvicorn with graceful shutdown.

SIGINT and SIGTERM are logged, then uvicorn stops accepting connections and
waits for in-flight requests before returning. The process then exits 0.
"""

import contextlib
import signal
from types import FrameType
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI

from .config import Settings


logger = structlog.get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class GracefulServer(uvicorn.Server):
    """uvicorn server that logs termination signals and exits normally after draining."""

    def handle_exit(self, sig: int, frame: Optional[FrameType]) -> None:
        logger.info(
            "shutdown_signal_received",
            signal=signal.Signals(sig).name,
            message="shutting down gracefully",
        )
        super().handle_exit(sig, frame)

    @contextlib.contextmanager
    def capture_signals(self):
        """Route shutdown signals to handle_exit for the lifetime of the server."""
        original_handlers = {sig: signal.signal(sig, self.handle_exit) for sig in SHUTDOWN_SIGNALS}
        try:
            yield
        finally:
            for sig, handler in original_handlers.items():
                signal.signal(sig, handler)


def build_server(app: FastAPI, settings: Settings) -> GracefulServer:
    """
    Build the uvicorn server for ``app``.

    No graceful-shutdown timeout is set: shutdown waits for every in-flight
    request to finish.
    """
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
        server_header=False,
        timeout_graceful_shutdown=None,
    )
    return GracefulServer(config)


def main() -> None:
    """Console entry point."""
    from .main import app

    settings: Settings = app.state.settings

    base_url = f"http://localhost:{settings.port}"
    logger.info(
        "server_starting",
        port=settings.port,
        environment=settings.environment,
        health_check=f"{base_url}/health",
        readiness_check=f"{base_url}/ready",
        metrics=f"{base_url}/metrics",
    )

    build_server(app, settings).run()
    logger.info("process_terminated")
