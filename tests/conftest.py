"""Shared pytest fixtures for sumapi tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sumapi.api.app import create_app
from sumapi.application.health import HealthService
from sumapi.core.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Fixture for settings that ignore any local .env file."""
    return Settings(_env_file=None, ENVIRONMENT="test", LOG_FORMAT="text")


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Fixture for a freshly built application with its own metrics registry."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Fixture for FastAPI TestClient."""
    return TestClient(app)


@pytest.fixture
def health_service(settings: Settings) -> HealthService:
    """Fixture for HealthService instance."""
    return HealthService(settings, version="9.9.9")
