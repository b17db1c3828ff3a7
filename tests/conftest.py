"""
Pytest Configuration and Shared Fixtures.

Provides common test fixtures for framework unit tests.
"""

import pytest
from unittest.mock import MagicMock
from typing import Callable


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Set up mock environment variables for testing."""
    env_vars = {
        "SERVER_HOST": "127.0.0.1",
        "SERVER_PORT": "8000",
        "APP_DEBUG": "true",
        "APP_LOG_LEVEL": "DEBUG",
        "SCHED_HRMS_BASE_URL": "http://hrms.test",
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)

    return env_vars


@pytest.fixture
def core_settings(mock_env_vars):
    """CoreSettings built from the mock environment, bypassing .env files."""
    from core.config import CoreSettings

    return CoreSettings(_env_file=None)


@pytest.fixture
def app_context(core_settings):
    """Create an AppContext instance with mock settings."""
    from core.app_context import AppContext

    return AppContext(settings=core_settings)


# =============================================================================
# Module Fixtures
# =============================================================================


@pytest.fixture
def mock_module_factory() -> Callable[[str], MagicMock]:
    """Factory producing IAppModule mocks with a given name."""
    from core.interface import IAppModule

    def _create(name: str) -> MagicMock:
        module = MagicMock(spec=IAppModule)
        module.get_module_name.return_value = name
        module.get_api_router.return_value = None
        module.get_status.return_value = {"status": "active", "details": {}}
        return module

    return _create


@pytest.fixture
def mock_module(mock_module_factory):
    """A single mock module named ``mock_module``."""
    return mock_module_factory("mock_module")
