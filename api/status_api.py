"""
Status API - System health and monitoring endpoints.
Provides endpoints for external monitoring integration.
"""
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request, status

from core.dependencies import ContextDep
from core.registry import ModuleRegistry

router = APIRouter(prefix="/api", tags=["status"])


def _get_registry(request: Request) -> ModuleRegistry:
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Module registry not initialized",
        )
    return registry


@router.get("/status")
async def get_status(request: Request, context: ContextDep) -> Dict[str, Any]:
    """
    Get application status and loaded modules.

    Returns:
        JSON with status information
    """
    registry = _get_registry(request)
    http_manager = getattr(request.app.state, "http_client_manager", None)

    return {
        "status": "running",
        "port": context.settings.server_port,
        "http_client": "running" if http_manager is not None and http_manager.is_running else "stopped",
        "modules_loaded": registry.get_module_names(),
        "modules": registry.get_statuses(),
    }


@router.get("/status/events")
async def get_events(context: ContextDep) -> Dict[str, Any]:
    """Recent framework events (module loading, startup, shutdown)."""
    return {"events": context.get_event_log()}


@router.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy"}
