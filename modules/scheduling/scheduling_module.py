"""
Scheduling Module Entry Point.

Implements IAppModule interface for integration with the admin console
framework. Exposes the SIS schedules tab API under ``/api/scheduling``.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from fastapi import APIRouter

from core.interface import IAppModule
from modules.scheduling.core.config import SchedulingSettings, get_scheduling_settings
from modules.scheduling.routers import schedules_router

if TYPE_CHECKING:
    from core.app_context import AppContext

logger = logging.getLogger(__name__)


class SchedulingModule(IAppModule):
    """
    Scheduling Module for SIS/HRMS schedule reconciliation.

    Features:
        - Merged SIS/HRMS schedule table with derived row actions
        - Teacher assignment, edit, substitute and restore flows
        - Subject/section import and assignment push to SIS
    """

    def __init__(self, settings: Optional[SchedulingSettings] = None) -> None:
        self._context: Optional["AppContext"] = None
        self._api_router: Optional[APIRouter] = None
        self._settings = settings or get_scheduling_settings()

    def get_module_name(self) -> str:
        """Return module identifier."""
        return "scheduling"

    def on_entry(self, context: "AppContext") -> None:
        """
        Initialize the scheduling module.

        Args:
            context: Application context from the main framework.
        """
        self._context = context
        logger.info("Scheduling module initializing...")

        self._api_router = APIRouter(prefix="/scheduling")
        self._api_router.include_router(schedules_router)

        context.log_event(
            f"Scheduling module loaded (HRMS backend: {self._settings.hrms_base_url})",
            "SCHEDULING",
        )
        logger.info("Scheduling module initialized")

    def get_api_router(self) -> Optional[APIRouter]:
        """Router mounted by the framework under ``/api``."""
        return self._api_router

    def on_shutdown(self) -> None:
        logger.info("Scheduling module shutting down")
        self._api_router = None

    def get_status(self) -> dict[str, Any]:
        if self._context is None:
            return {"status": "initializing", "details": {}}
        return {
            "status": "active",
            "details": {
                "hrms_base_url": self._settings.hrms_base_url,
                "items_per_page": self._settings.items_per_page,
                "substitute_path": self._settings.substitute_path,
            },
        }
