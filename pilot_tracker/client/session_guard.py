"""
Session verification when the app becomes visible again.

Each time the app regains visibility the guard checks the auth session
against the API. After ``max_attempts`` consecutive failures it clears
client state and calls the hard-reload callback. On success it replays
the offline queue and refreshes the active sessions.
"""
import logging
from enum import Enum
from typing import Callable, Optional

import httpx

from pilot_tracker.client.api_client import PilotTrackerClient
from pilot_tracker.client.offline_queue import OfflineQueue
from pilot_tracker.client.stores import ActiveSessionStore, ProgramSelectionStore
from pilot_tracker.config import get_settings

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    SYNCED = "synced"
    ERROR = "error"
    RECONNECTING = "reconnecting"
    RELOADED = "reloaded"


class SessionGuard:
    def __init__(
        self,
        client: PilotTrackerClient,
        sessions: ActiveSessionStore,
        on_reload: Callable[[], None],
        queue: Optional[OfflineQueue] = None,
        selection: Optional[ProgramSelectionStore] = None,
        max_attempts: Optional[int] = None,
    ):
        self.client = client
        self.sessions = sessions
        self.on_reload = on_reload
        self.queue = queue
        self.selection = selection
        self.max_attempts = max_attempts or get_settings().session_verify_attempts
        self.failed_attempts = 0
        self.status = SyncStatus.SYNCED

    async def _verify(self) -> bool:
        try:
            await self.client.get_me()
            return True
        except httpx.HTTPError as e:
            logger.warning(f"Session verification failed: {e}")
            return False

    def _hard_reload(self) -> None:
        logger.warning(f"Session lost after {self.failed_attempts} attempts, reloading")
        self.sessions.clear()
        if self.selection is not None:
            self.selection.reset()
        self.failed_attempts = 0
        self.status = SyncStatus.RELOADED
        self.on_reload()

    async def on_visibility_change(self, visible: bool) -> SyncStatus:
        """Handle a visibility change; hidden transitions are ignored."""
        if not visible:
            return self.status

        if not await self._verify():
            self.failed_attempts += 1
            if self.failed_attempts >= self.max_attempts:
                self._hard_reload()
            else:
                self.status = SyncStatus.RECONNECTING
            return self.status

        self.failed_attempts = 0
        self.status = SyncStatus.SYNCED

        if self.queue is not None and self.queue.pending_count() > 0:
            result = await self.queue.sync_pending(self.client)
            if not result["success"]:
                self.status = SyncStatus.ERROR

        self.sessions.set_loading(True)
        try:
            self.sessions.set_sessions(await self.client.list_active_sessions())
            self.sessions.set_error(None)
        except httpx.HTTPError as e:
            logger.error(f"Error refreshing active sessions: {e}")
            self.sessions.set_error(str(e))
        finally:
            self.sessions.set_loading(False)

        return self.status
