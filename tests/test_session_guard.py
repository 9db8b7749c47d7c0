import httpx
import pytest

from pilot_tracker.client.offline_queue import OfflineQueue
from pilot_tracker.client.session_guard import SessionGuard, SyncStatus
from pilot_tracker.client.stores import ActiveSessionStore, ProgramSelectionStore


class DummyClient:
    def __init__(self, authenticated=True, sessions=None):
        self.authenticated = authenticated
        self.sessions = sessions or []
        self.me_calls = 0
        self.submissions = []

    async def get_me(self):
        self.me_calls += 1
        if not self.authenticated:
            raise httpx.ConnectError("no session")
        return {"id": "user-1"}

    async def list_active_sessions(self):
        return self.sessions

    async def create_submission(self, site_id, payload):
        self.submissions.append((site_id, payload))
        return {"id": "server-id"}


@pytest.mark.asyncio
async def test_reloads_after_max_failed_attempts():
    reloads = []
    sessions = ActiveSessionStore()
    sessions.set_sessions([{"session_id": "a", "session_status": "Opened"}])
    sessions.set_current_session("a")
    selection = ProgramSelectionStore()
    selection.select_program({"id": "p1"})
    guard = SessionGuard(
        DummyClient(authenticated=False),
        sessions,
        on_reload=lambda: reloads.append(True),
        selection=selection,
        max_attempts=3,
    )

    assert await guard.on_visibility_change(True) is SyncStatus.RECONNECTING
    assert await guard.on_visibility_change(True) is SyncStatus.RECONNECTING
    assert reloads == []

    assert await guard.on_visibility_change(True) is SyncStatus.RELOADED
    assert reloads == [True]
    assert sessions.sessions == []
    assert sessions.current_session_id is None
    assert selection.selected_program is None
    assert guard.failed_attempts == 0


@pytest.mark.asyncio
async def test_hidden_transition_does_nothing():
    client = DummyClient(authenticated=False)
    guard = SessionGuard(client, ActiveSessionStore(), on_reload=lambda: None, max_attempts=1)

    await guard.on_visibility_change(False)

    assert client.me_calls == 0


@pytest.mark.asyncio
async def test_success_resets_failures_and_refreshes_sessions():
    client = DummyClient(
        sessions=[
            {"session_id": "a", "session_status": "Working"},
            {"session_id": "b", "session_status": "Cancelled"},
        ]
    )
    sessions = ActiveSessionStore()
    guard = SessionGuard(client, sessions, on_reload=lambda: None, max_attempts=3)
    guard.failed_attempts = 2

    status = await guard.on_visibility_change(True)

    assert status is SyncStatus.SYNCED
    assert guard.failed_attempts == 0
    assert [s["session_id"] for s in sessions.sessions] == ["a"]
    assert sessions.is_loading is False


@pytest.mark.asyncio
async def test_success_syncs_offline_queue(tmp_path):
    queue = OfflineQueue(tmp_path / "offline.json")
    queue.enqueue("site-1", {"temperature": 70, "humidity": 45})
    client = DummyClient()
    guard = SessionGuard(client, ActiveSessionStore(), on_reload=lambda: None, queue=queue)

    status = await guard.on_visibility_change(True)

    assert status is SyncStatus.SYNCED
    assert client.submissions == [("site-1", {"temperature": 70, "humidity": 45})]
    assert queue.pending_count() == 0
