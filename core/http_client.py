"""
HTTP Client Lifecycle Management.

Provides lifecycle-managed httpx.AsyncClient instances for talking to the
HRMS backend. The client is bound to its owning scope: the FastAPI lifespan
for the web application, or an ``async with`` block for scripts.

Usage:
    # In main.py lifespan:
    async with create_http_client_context(app, base_url=settings.hrms_base_url):
        yield

    # In FastAPI routes (via dependency injection):
    def get_http_client(request: Request) -> httpx.AsyncClient:
        return request.app.state.http_client

    # In scripts:
    async with create_standalone_http_client(base_url=...) as client:
        hrms = HrmsScheduleClient(http_client=client)
        await hrms.fetch_sis_schedules()
"""

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncGenerator, Optional

import httpx

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _build_headers(api_token: Optional[str]) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"
    return headers


class HttpClientManager:
    """
    Manages the lifecycle of httpx.AsyncClient.

    The HRMS backend is slow on SIS-backed endpoints, so no request timeout
    is applied unless one is configured explicitly.
    """

    def __init__(
        self,
        base_url: str = "",
        api_token: Optional[str] = None,
        timeout: Optional[float] = None,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
        keepalive_expiry: float = 30.0,
    ) -> None:
        """
        Initialize the HTTP client manager.

        Args:
            base_url: HRMS backend base URL; relative request paths resolve against it.
            api_token: Optional bearer token sent with every request.
            timeout: Request timeout in seconds. None disables timeouts.
            max_connections: Maximum number of concurrent connections.
            max_keepalive_connections: Maximum keep-alive connections.
            keepalive_expiry: Keep-alive connection expiry in seconds.
        """
        self._base_url = base_url
        self._headers = _build_headers(api_token)
        self._timeout = httpx.Timeout(timeout)
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
            keepalive_expiry=keepalive_expiry,
        )
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self) -> httpx.AsyncClient:
        """
        Create and start the HTTP client.

        Raises:
            RuntimeError: If client is already started.
        """
        if self._client is not None:
            raise RuntimeError("HTTP client already started")

        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            limits=self._limits,
            follow_redirects=True,
        )
        logger.info(
            f"HTTP client started (base_url={self._base_url or '-'}, "
            f"max_connections={self._limits.max_connections})"
        )
        return self._client

    async def stop(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client closed")

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Get the managed HTTP client.

        Raises:
            RuntimeError: If client is not started.
        """
        if self._client is None:
            raise RuntimeError(
                "HTTP client not started. Ensure lifespan context is properly configured."
            )
        return self._client

    @property
    def is_running(self) -> bool:
        """Check if the HTTP client is running."""
        return self._client is not None and not self._client.is_closed


@asynccontextmanager
async def create_http_client_context(
    app: "FastAPI",
    base_url: str = "",
    api_token: Optional[str] = None,
    timeout: Optional[float] = None,
    max_connections: int = 100,
) -> AsyncGenerator[HttpClientManager, None]:
    """
    Async context manager for HTTP client lifecycle.

    Stores the client on ``app.state.http_client`` for the duration of the
    lifespan and removes it afterwards.

    Example:
        @asynccontextmanager
        async def lifespan(app: FastAPI):
            async with create_http_client_context(app, base_url="http://hrms"):
                yield
    """
    manager = HttpClientManager(
        base_url=base_url,
        api_token=api_token,
        timeout=timeout,
        max_connections=max_connections,
    )

    try:
        client = await manager.start()
        app.state.http_client = client
        app.state.http_client_manager = manager
        yield manager
    finally:
        await manager.stop()
        if hasattr(app.state, "http_client"):
            delattr(app.state, "http_client")
        if hasattr(app.state, "http_client_manager"):
            delattr(app.state, "http_client_manager")


@asynccontextmanager
async def create_standalone_http_client(
    base_url: str = "",
    api_token: Optional[str] = None,
    timeout: Optional[float] = None,
    max_connections: int = 50,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create a standalone HTTP client for scripts and background jobs.

    The client lifecycle is bound to the context manager scope.

    Example:
        async with create_standalone_http_client(base_url="http://hrms") as client:
            hrms = HrmsScheduleClient(http_client=client)
            await hrms.sync_existing_assignments()
    """
    client = httpx.AsyncClient(
        base_url=base_url,
        headers=_build_headers(api_token),
        timeout=httpx.Timeout(timeout),
        limits=httpx.Limits(max_connections=max_connections),
        follow_redirects=True,
    )

    logger.debug(f"Standalone HTTP client created (base_url={base_url or '-'})")

    try:
        yield client
    finally:
        await client.aclose()
        logger.debug("Standalone HTTP client closed")


def get_http_client_from_app(app: "FastAPI") -> httpx.AsyncClient:
    """
    Get HTTP client from FastAPI app state.

    Raises:
        RuntimeError: If HTTP client is not configured or is closed.
    """
    client = getattr(app.state, "http_client", None)
    if client is None or client.is_closed:
        raise RuntimeError(
            "HTTP client not available. Ensure lifespan context is properly configured."
        )
    return client
