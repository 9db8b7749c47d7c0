import uuid

import httpx
import pytest

from pilot_tracker.client.offline_queue import OfflineQueue, retry


class DummyClient:
    """Records submissions; sites listed in ``failing`` always error."""

    def __init__(self, failing=(), flaky_failures=0):
        self.failing = {str(s) for s in failing}
        self.flaky_failures = flaky_failures
        self.calls: list[str] = []

    async def create_submission(self, site_id, payload):
        self.calls.append(str(site_id))
        if str(site_id) in self.failing:
            raise httpx.ConnectError("offline")
        if self.flaky_failures:
            self.flaky_failures -= 1
            raise httpx.ReadTimeout("slow")
        return {"id": str(uuid.uuid4()), **payload}


@pytest.fixture
def queue(tmp_path) -> OfflineQueue:
    return OfflineQueue(tmp_path / "queue" / "offline.json")


def test_enqueue_persists_to_disk(queue, tmp_path):
    site_id = uuid.uuid4()
    queue.enqueue(site_id, {"temperature": 71.5, "humidity": 40})

    reopened = OfflineQueue(tmp_path / "queue" / "offline.json")
    assert reopened.pending_count() == 1
    [entry] = reopened.pending_for_site(site_id)
    assert entry["payload"] == {"temperature": 71.5, "humidity": 40}
    assert entry["synced"] is False


@pytest.mark.asyncio
async def test_sync_with_nothing_pending(queue):
    result = await queue.sync_pending(DummyClient())

    assert result == {
        "success": True,
        "message": "No pending submissions to sync",
        "pending_count": 0,
    }


@pytest.mark.asyncio
async def test_sync_marks_synced_and_keeps_failures(queue):
    good_site, bad_site = uuid.uuid4(), uuid.uuid4()
    queue.enqueue(good_site, {"temperature": 70, "humidity": 50})
    queue.enqueue(bad_site, {"temperature": 65, "humidity": 55})
    client = DummyClient(failing=[bad_site])
    progress = []

    result = await queue.sync_pending(
        client,
        on_progress=lambda current, total, failed: progress.append((current, total, failed)),
        attempts=3,
        delay_seconds=0,
    )

    assert result["success"] is False
    assert result["message"] == "Synced 1 submissions, 1 failed"
    assert result["pending_count"] == 1
    # Failing entry retried 3 times
    assert client.calls.count(str(bad_site)) == 3
    assert progress[-1] == (2, 2, 1)

    [remaining] = queue.pending()
    assert remaining["site_id"] == str(bad_site)
    assert "offline" in remaining["last_error"]


@pytest.mark.asyncio
async def test_sync_retries_transient_errors(queue):
    queue.enqueue(uuid.uuid4(), {"temperature": 70, "humidity": 50})

    result = await queue.sync_pending(DummyClient(flaky_failures=2), attempts=3, delay_seconds=0)

    assert result["success"] is True
    assert result["pending_count"] == 0


@pytest.mark.asyncio
async def test_clear_synced_drops_only_synced(queue):
    first = queue.enqueue(uuid.uuid4(), {"temperature": 70, "humidity": 50})
    queue.enqueue(uuid.uuid4(), {"temperature": 71, "humidity": 51})
    queue.mark_synced(first, "server-id")

    assert queue.clear_synced() == 1
    assert queue.pending_count() == 1


@pytest.mark.asyncio
async def test_retry_reraises_last_error():
    attempts = []

    async def always_fails():
        attempts.append(1)
        raise httpx.ConnectError("down")

    with pytest.raises(httpx.ConnectError):
        await retry(always_fails, attempts=2, delay_seconds=0)

    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_sync_rejects_zero_attempts(queue):
    queue.enqueue(uuid.uuid4(), {"temperature": 70, "humidity": 50})
    client = DummyClient()

    with pytest.raises(ValueError):
        await queue.sync_pending(client, attempts=0, delay_seconds=0)

    assert client.calls == []
    assert queue.pending_count() == 1
