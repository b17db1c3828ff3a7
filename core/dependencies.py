"""
FastAPI Dependencies - Dependency Injection for API Routers.

Provides `Annotated[Service, Depends(get_service)]` patterns for
clean dependency injection in FastAPI route handlers.

Usage:
    from core.dependencies import HttpClientDep, SettingsDep

    @router.get("/items")
    async def get_items(http_client: HttpClientDep, settings: SettingsDep):
        ...
"""

from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, Request, status

from core.app_context import AppContext
from core.config import CoreSettings, get_core_settings
from core.http_client import get_http_client_from_app


# =============================================================================
# Configuration Dependencies
# =============================================================================

def get_settings() -> CoreSettings:
    """FastAPI dependency for the framework settings."""
    return get_core_settings()


SettingsDep = Annotated[CoreSettings, Depends(get_settings)]


def get_app_context(request: Request) -> AppContext:
    """
    FastAPI dependency for the shared AppContext.

    Raises:
        HTTPException 503: If the application has not finished startup.
    """
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Application context not initialized",
        )
    return context


ContextDep = Annotated[AppContext, Depends(get_app_context)]


# =============================================================================
# HTTP Client Dependencies
# =============================================================================

def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    FastAPI dependency for shared HTTP client.

    Gets the HTTP client from app.state via the centralized helper.

    Raises:
        RuntimeError: If HTTP client is not available or closed.
    """
    return get_http_client_from_app(request.app)


# Type alias for dependency injection
HttpClientDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
