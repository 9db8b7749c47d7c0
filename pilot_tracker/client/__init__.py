"""
Client-side API access, state stores, offline queue and session guard.
"""
from pilot_tracker.client.api_client import OperationFailed, PilotTrackerClient
from pilot_tracker.client.offline_queue import OfflineQueue
from pilot_tracker.client.session_guard import SessionGuard, SyncStatus
from pilot_tracker.client.stores import ActiveSessionStore, ProgramSelectionStore

__all__ = [
    "ActiveSessionStore",
    "OfflineQueue",
    "OperationFailed",
    "PilotTrackerClient",
    "ProgramSelectionStore",
    "SessionGuard",
    "SyncStatus",
]
