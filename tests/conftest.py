# =============================================================================
# DevOps Web App - Test Fixtures
# =============================================================================
"""Shared fixtures: every test gets a fresh app built from explicit settings."""

import pytest
from fastapi.testclient import TestClient

from devops_webapp.main import create_app
from tests.helpers import make_settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings):
    """Create test client for a development-mode app."""
    return TestClient(create_app(settings))


@pytest.fixture
def production_client():
    """Create test client for a production-mode app."""
    return TestClient(create_app(make_settings(environment="production")))
