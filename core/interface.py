"""
IAppModule - contract between the console framework and its feature modules.

A module owns one slice of the console (the scheduling module owns the SIS
schedules tab). The framework constructs it, hands it the AppContext,
mounts its router and polls its status for ``/api/status``.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from fastapi import APIRouter

    from core.app_context import AppContext


class IAppModule(ABC):
    """Base class every registered module derives from."""

    @abstractmethod
    def get_module_name(self) -> str:
        """Registry key, also shown in ``/api/status`` (e.g. ``scheduling``)."""

    @abstractmethod
    def on_entry(self, context: "AppContext") -> None:
        """
        Activate the module.

        Runs synchronously at registration, before the event loop exists;
        build routers and read settings here, defer network work to
        ``async_startup``.
        """

    def get_api_router(self) -> Optional["APIRouter"]:
        """Router the framework mounts under ``/api``; None when the module has no endpoints."""
        return None

    async def async_startup(self) -> None:
        """Lifespan startup hook, awaited after the shared HTTP client is up."""

    def on_shutdown(self) -> None:
        """Lifespan shutdown hook; the module is unregistered afterwards."""

    def get_status(self) -> dict[str, Any]:
        """
        Health snapshot for monitoring.

        Returns:
            dict: ``{"status": "active" | "warning" | "error" | "initializing",
            "details": {...}}``
        """
        return {"status": "active", "details": {}}
