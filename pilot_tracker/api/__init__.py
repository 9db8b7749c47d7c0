"""
API modules for Pilot Tracker.
"""
from pilot_tracker.api.auth import get_current_user
from pilot_tracker.api.programs import router as programs_router
from pilot_tracker.api.rpc import router as rpc_router
from pilot_tracker.api.sessions import router as sessions_router
from pilot_tracker.api.sites import router as sites_router

__all__ = [
    "get_current_user",
    "programs_router",
    "rpc_router",
    "sessions_router",
    "sites_router",
]
