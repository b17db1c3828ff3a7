"""
Scheduling Module Routers.
"""

from modules.scheduling.routers.schedules import router as schedules_router

__all__ = ["schedules_router"]
