"""
AppContext - state shared between the framework and its modules.

Carries the core settings and a bounded, human-readable event log that
``/api/status/events`` exposes (module activation, router mounting,
startup and shutdown).
"""
import logging
from datetime import datetime
from typing import Optional

from core.config import CoreSettings, get_core_settings

logger = logging.getLogger(__name__)

MAX_EVENT_LOG_ENTRIES = 500


class AppContext:
    """Handed to every module's ``on_entry``; one instance per application."""

    def __init__(self, settings: Optional[CoreSettings] = None) -> None:
        self._settings = settings or get_core_settings()
        self._event_log: list[str] = []
        self._max_log_entries = MAX_EVENT_LOG_ENTRIES

    @property
    def settings(self) -> CoreSettings:
        return self._settings

    def log_event(self, message: str, level: str = "INFO") -> None:
        """
        Record ``message`` as ``[HH:MM:SS] [LEVEL] message`` and log it.

        ``level`` is a free-form tag (``LOADER``, ``SUCCESS``, ``SCHEDULING``);
        only the newest entries are kept.
        """
        stamp = datetime.now().strftime("%H:%M:%S")
        self._event_log.append(f"[{stamp}] [{level}] {message}")
        if len(self._event_log) > self._max_log_entries:
            del self._event_log[: len(self._event_log) - self._max_log_entries]

        logger.info(message)

    def get_event_log(self) -> list[str]:
        """Snapshot of the event log, oldest first."""
        return list(self._event_log)
