"""Core module - Application kernel components."""
from core.app_context import AppContext
from core.config import CoreSettings, get_core_settings
from core.exceptions import (
    HrmsConnectionError,
    HrmsError,
    HrmsRequestError,
    HrmsResponseError,
    ScheduleActionError,
)
from core.http_client import (
    HttpClientManager,
    create_http_client_context,
    create_standalone_http_client,
    get_http_client_from_app,
)
from core.interface import IAppModule
from core.logging_config import setup_logging
from core.registry import ModuleRegistry

__all__ = [
    "AppContext",
    "CoreSettings",
    "get_core_settings",
    "HrmsError",
    "HrmsConnectionError",
    "HrmsRequestError",
    "HrmsResponseError",
    "ScheduleActionError",
    "HttpClientManager",
    "create_http_client_context",
    "create_standalone_http_client",
    "get_http_client_from_app",
    "IAppModule",
    "setup_logging",
    "ModuleRegistry",
]
