"""
HRMS Schedule Console - Entry Point.

Headless ASGI application for uvicorn execution.

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000 --reload

Or run directly:
    python main.py
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI

from api.status_api import router as status_router
from core.app_context import AppContext
from core.config import CoreSettings, get_core_settings
from core.http_client import create_http_client_context
from core.logging_config import setup_logging
from core.registry import ModuleRegistry
from modules.scheduling.core.config import SchedulingSettings, get_scheduling_settings
from modules.scheduling.scheduling_module import SchedulingModule

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Application Factory
# -----------------------------------------------------------------------------


def create_registry(context: AppContext, scheduling_settings: SchedulingSettings) -> ModuleRegistry:
    """Create the ModuleRegistry with the application's modules."""
    registry = ModuleRegistry()
    registry.set_context(context)
    registry.register(SchedulingModule(settings=scheduling_settings))
    context.log_event(f"Loaded {len(registry.get_module_names())} module(s)", "LOADER")
    return registry


def create_app(
    core_settings: Optional[CoreSettings] = None,
    scheduling_settings: Optional[SchedulingSettings] = None,
) -> FastAPI:
    """
    Create the FastAPI application with all routers configured.

    The HTTP client for the HRMS backend lives for the duration of the
    lifespan and is stored in ``app.state`` for dependency injection.
    """
    core_settings = core_settings or get_core_settings()
    scheduling_settings = scheduling_settings or get_scheduling_settings()

    context = AppContext(settings=core_settings)
    registry = create_registry(context, scheduling_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting HRMS Schedule Console...")

        async with create_http_client_context(
            app,
            base_url=scheduling_settings.hrms_base_url,
            api_token=scheduling_settings.api_token_value(),
            timeout=scheduling_settings.request_timeout_seconds,
        ):
            logger.info("HTTP client initialized (stored in app.state for DI)")

            await registry.async_startup_all()
            context.log_event("Application started successfully", "SUCCESS")

            yield

            logger.info("Shutting down HRMS Schedule Console...")
            registry.shutdown_all()
            if hasattr(app.state, "schedules_tab"):
                delattr(app.state, "schedules_tab")

        logger.info("Cleanup complete")

    app = FastAPI(
        title="HRMS Schedule Console",
        description="SIS schedule reconciliation and teacher assignment",
        lifespan=lifespan,
    )
    app.state.context = context
    app.state.registry = registry

    app.include_router(status_router)

    registry.include_api_routers(app, prefix="/api")

    return app


# -----------------------------------------------------------------------------
# Module-level Application Instance
# -----------------------------------------------------------------------------

# Setup logging first
setup_logging(
    log_level=get_core_settings().numeric_log_level,
    log_dir=get_core_settings().log_dir,
)

# Export for uvicorn
app = create_app()


# -----------------------------------------------------------------------------
# Direct Execution
# -----------------------------------------------------------------------------


def main() -> None:
    """Run the application directly with uvicorn."""
    settings = get_core_settings()

    uvicorn_config = {
        "host": settings.server_host,
        "port": settings.server_port,
        "reload": settings.app_debug,
        "log_level": "warning",  # Suppress uvicorn info logs
        "access_log": False,     # Disable uvicorn access logs
    }

    # If reload is enabled, exclude logs and cache directories
    if settings.app_debug:
        uvicorn_config["reload_excludes"] = [
            "logs/*",
            "**/__pycache__/*",
            "**/*.pyc",
            ".venv/*",
            "*.log",
        ]

    uvicorn.run("main:app", **uvicorn_config)


if __name__ == "__main__":
    main()
