"""
Core Application Settings.

Framework-level settings (server binding, logging) loaded from environment
variables. Module settings live with their modules.
"""

import logging
from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CoreSettings(BaseSettings):
    """Server and logging settings shared by every module."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    server_host: Annotated[
        str,
        Field(validation_alias="SERVER_HOST"),
    ] = "127.0.0.1"

    server_port: Annotated[
        int,
        Field(validation_alias="SERVER_PORT"),
    ] = 8000

    app_debug: Annotated[
        bool,
        Field(validation_alias="APP_DEBUG"),
    ] = False

    app_log_level: Annotated[
        str,
        Field(
            description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
            validation_alias="APP_LOG_LEVEL",
        ),
    ] = "INFO"

    log_dir: Annotated[
        Optional[str],
        Field(
            description="Directory for rotating log files (defaults to ./logs)",
            validation_alias="LOG_DIR",
        ),
    ] = None

    @property
    def numeric_log_level(self) -> int:
        """Logging constant for ``app_log_level``; unknown names fall back to INFO."""
        return getattr(logging, self.app_log_level.upper(), logging.INFO)


@lru_cache
def get_core_settings() -> CoreSettings:
    """
    Get cached core settings.

    Returns:
        CoreSettings: Core settings instance.
    """
    return CoreSettings()
