"""
Unit Tests for core.registry module.

Tests ModuleRegistry registration and lifecycle handling.
"""

import pytest
from unittest.mock import AsyncMock

from core.registry import ModuleRegistry


class TestModuleRegistry:
    """Tests for ModuleRegistry class."""

    def test_initialization(self):
        """Test ModuleRegistry initializes empty."""
        registry = ModuleRegistry()

        assert registry.get_module_names() == []
        assert registry._context is None

    def test_registries_are_independent(self, mock_module):
        """Each registry keeps its own modules."""
        first = ModuleRegistry()
        second = ModuleRegistry()

        first.register(mock_module)

        assert second.get_module("mock_module") is None

    def test_set_context(self, app_context):
        registry = ModuleRegistry()
        registry.set_context(app_context)

        assert registry._context is app_context

    def test_register_module(self, mock_module):
        """Test register() adds module to registry."""
        registry = ModuleRegistry()
        result = registry.register(mock_module)

        assert result is True
        assert registry.get_module("mock_module") is mock_module

    def test_register_duplicate_returns_false(self, mock_module_factory):
        registry = ModuleRegistry()

        registry.register(mock_module_factory("test"))
        result = registry.register(mock_module_factory("test"))

        assert result is False
        assert registry.get_module_names() == ["test"]

    def test_register_initializes_module_with_context(self, app_context, mock_module):
        """Test register() calls on_entry when context available."""
        registry = ModuleRegistry()
        registry.set_context(app_context)

        registry.register(mock_module)

        mock_module.on_entry.assert_called_once_with(app_context)
        assert any("mock_module" in event for event in app_context.get_event_log())

    def test_register_survives_on_entry_failure(self, app_context, mock_module):
        mock_module.on_entry.side_effect = RuntimeError("boom")
        registry = ModuleRegistry()
        registry.set_context(app_context)

        assert registry.register(mock_module) is True
        assert any("activation failed" in event for event in app_context.get_event_log())

    def test_register_class(self, app_context):
        from modules.scheduling.scheduling_module import SchedulingModule

        registry = ModuleRegistry()
        registry.set_context(app_context)

        assert registry.register_class(SchedulingModule) is True
        assert registry.get_module("scheduling") is not None

    def test_unregister_calls_shutdown(self, mock_module):
        registry = ModuleRegistry()
        registry.register(mock_module)

        assert registry.unregister("mock_module") is True
        mock_module.on_shutdown.assert_called_once()
        assert registry.get_module("mock_module") is None

    def test_unregister_unknown_returns_false(self):
        assert ModuleRegistry().unregister("missing") is False

    def test_get_statuses_reports_errors(self, mock_module_factory):
        registry = ModuleRegistry()
        healthy = mock_module_factory("healthy")
        broken = mock_module_factory("broken")
        broken.get_status.side_effect = RuntimeError("status failure")
        registry.register(healthy)
        registry.register(broken)

        statuses = registry.get_statuses()

        assert statuses["healthy"]["status"] == "active"
        assert statuses["broken"]["status"] == "error"
        assert "status failure" in statuses["broken"]["details"]["error"]

    @pytest.mark.asyncio
    async def test_async_startup_all(self, mock_module_factory):
        registry = ModuleRegistry()
        good = mock_module_factory("good")
        good.async_startup = AsyncMock()
        bad = mock_module_factory("bad")
        bad.async_startup = AsyncMock(side_effect=RuntimeError("startup failure"))
        registry.register(good)
        registry.register(bad)

        await registry.async_startup_all()

        good.async_startup.assert_awaited_once()
        bad.async_startup.assert_awaited_once()

    def test_shutdown_all(self, mock_module_factory):
        registry = ModuleRegistry()
        modules = [mock_module_factory(name) for name in ("a", "b")]
        for module in modules:
            registry.register(module)

        registry.shutdown_all()

        assert registry.get_module_names() == []
        for module in modules:
            module.on_shutdown.assert_called_once()

    def test_include_api_routers(self, app_context, mock_module_factory):
        from fastapi import APIRouter, FastAPI

        router = APIRouter(prefix="/things")

        @router.get("/ping")
        async def ping():
            return {"ok": True}

        with_router = mock_module_factory("with_router")
        with_router.get_api_router.return_value = router
        registry = ModuleRegistry()
        registry.set_context(app_context)
        registry.register(with_router)
        registry.register(mock_module_factory("headless"))
        app = FastAPI()

        mounted = registry.include_api_routers(app)

        assert mounted == ["with_router"]
        assert "/api/things/ping" in {route.path for route in app.routes}
        assert any("with_router at /api" in event for event in app_context.get_event_log())
