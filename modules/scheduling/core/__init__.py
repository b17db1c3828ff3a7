"""
Scheduling Module Core Package.

Contains configuration and core utilities.
"""

from modules.scheduling.core.config import SchedulingSettings, get_scheduling_settings

__all__ = ["SchedulingSettings", "get_scheduling_settings"]
