"""Tests for the uvicorn entry point and graceful shutdown."""

import logging
import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

import httpx
import pytest

from devops_webapp.main import create_app
from devops_webapp.server import GracefulServer, build_server


PROJECT_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def server(settings):
    return build_server(create_app(settings), settings)


class TestGracefulServer:

    def test_build_server_uses_settings(self, server, settings):
        assert isinstance(server, GracefulServer)
        assert server.config.port == settings.port
        assert server.config.host == settings.host
        assert server.config.server_header is False
        assert server.config.timeout_graceful_shutdown is None

    @pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
    def test_signal_is_logged_and_starts_drain(self, server, caplog, sig):
        with caplog.at_level(logging.INFO):
            server.handle_exit(sig, None)

        assert server.should_exit is True
        assert "shutdown_signal_received" in caplog.text
        assert sig.name in caplog.text

    def test_signal_handlers_are_restored(self, server):
        before = signal.getsignal(signal.SIGTERM)

        with server.capture_signals():
            assert signal.getsignal(signal.SIGTERM) == server.handle_exit

        assert signal.getsignal(signal.SIGTERM) == before


def _free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _wait_until_serving(proc: subprocess.Popen, port: int, timeout: float = 15.0) -> None:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if proc.poll() is not None:
            pytest.fail(f"server exited early with status {proc.returncode}")
        try:
            if httpx.get(f"http://127.0.0.1:{port}/health", timeout=0.5).status_code == 200:
                return
        except httpx.TransportError:
            time.sleep(0.1)
    pytest.fail("server did not start listening")


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX signals")
class TestProcessShutdown:
    """Runs the real entry point in a child process."""

    def test_sigterm_exits_with_status_zero(self):
        port = _free_port()
        env = {
            **os.environ,
            "HOST": "127.0.0.1",
            "PORT": str(port),
            "ENVIRONMENT": "production",
            "PYTHONUNBUFFERED": "1",
        }
        proc = subprocess.Popen(
            [sys.executable, "-m", "devops_webapp"],
            cwd=PROJECT_ROOT,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        try:
            _wait_until_serving(proc, port)
            proc.send_signal(signal.SIGTERM)
            output, _ = proc.communicate(timeout=15)
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.communicate()

        assert proc.returncode == 0
        assert "shutdown_signal_received" in output
        assert "SIGTERM" in output
