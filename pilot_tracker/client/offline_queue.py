"""
Offline submission queue.

Submissions recorded without connectivity are appended to a local JSON
file and replayed against the API by ``sync_pending``. Entries stay in the
file, marked synced, until ``clear_synced`` drops them.
"""
import asyncio
import json
import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import UUID

import httpx
from pydantic_core import to_jsonable_python

from pilot_tracker.client.api_client import PilotTrackerClient
from pilot_tracker.config import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int, int], None]


async def retry(
    fn: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay_seconds: float = 0.3,
) -> T:
    """
    Await ``fn`` up to ``attempts`` times with exponential backoff.

    Only transport and HTTP status errors are retried; the last one is re-raised.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(attempts):
        try:
            return await fn()
        except httpx.HTTPError as e:
            if attempt == attempts - 1:
                raise
            wait = delay_seconds * 2 ** attempt
            logger.info(f"Retry attempt {attempt + 1} after {e!r}, waiting {wait:.2f}s")
            await asyncio.sleep(wait)


class OfflineQueue:
    """Pending submissions persisted to a JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or get_settings().offline_queue_path)

    def _load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, entries: list[dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)
        os.replace(tmp_path, self.path)

    def enqueue(self, site_id: UUID, payload: dict[str, Any]) -> str:
        """Store a submission for later sync. Returns its local id."""
        entries = self._load()
        local_id = uuid.uuid4().hex
        entries.append({
            "local_id": local_id,
            "site_id": str(site_id),
            "payload": to_jsonable_python(payload),
            "queued_at": datetime.now(timezone.utc).isoformat(),
            "synced": False,
            "submission_id": None,
            "last_error": None,
        })
        self._save(entries)
        logger.info(f"Queued offline submission {local_id} for site {site_id}")
        return local_id

    def pending(self) -> list[dict[str, Any]]:
        return [e for e in self._load() if not e["synced"]]

    def pending_count(self) -> int:
        return len(self.pending())

    def pending_for_site(self, site_id: UUID) -> list[dict[str, Any]]:
        return [e for e in self.pending() if e["site_id"] == str(site_id)]

    def mark_synced(self, local_id: str, submission_id: Optional[str] = None) -> None:
        entries = self._load()
        for entry in entries:
            if entry["local_id"] == local_id:
                entry["synced"] = True
                entry["submission_id"] = submission_id
                entry["last_error"] = None
        self._save(entries)

    def _record_error(self, local_id: str, error: str) -> None:
        entries = self._load()
        for entry in entries:
            if entry["local_id"] == local_id:
                entry["last_error"] = error
        self._save(entries)

    def clear_synced(self) -> int:
        """Drop synced entries. Returns how many were removed."""
        entries = self._load()
        remaining = [e for e in entries if not e["synced"]]
        self._save(remaining)
        return len(entries) - len(remaining)

    async def sync_pending(
        self,
        client: PilotTrackerClient,
        on_progress: Optional[ProgressCallback] = None,
        attempts: Optional[int] = None,
        delay_seconds: Optional[float] = None,
    ) -> dict[str, Any]:
        """
        Replay pending submissions, each with retries.

        A failing entry stays pending and doesn't stop the others.

        Returns:
            ``{"success", "message", "pending_count"}``; success is True only
            if nothing failed.
        """
        settings = get_settings()
        if attempts is None:
            attempts = settings.sync_retry_attempts
        if delay_seconds is None:
            delay_seconds = settings.sync_retry_delay_seconds

        pending = self.pending()
        if not pending:
            return {
                "success": True,
                "message": "No pending submissions to sync",
                "pending_count": 0,
            }

        total = len(pending)
        synced = 0
        failed = 0
        logger.info(f"Syncing {total} offline submission(s)")

        for index, entry in enumerate(pending, start=1):
            if on_progress:
                on_progress(index, total, failed)

            try:
                created = await retry(
                    lambda entry=entry: client.create_submission(entry["site_id"], entry["payload"]),
                    attempts=attempts,
                    delay_seconds=delay_seconds,
                )
            except httpx.HTTPError as e:
                failed += 1
                logger.error(f"Failed to sync submission {entry['local_id']}: {e}")
                self._record_error(entry["local_id"], str(e))
                continue

            self.mark_synced(entry["local_id"], created.get("id"))
            synced += 1

        if on_progress:
            on_progress(total, total, failed)

        return {
            "success": failed == 0,
            "message": f"Synced {synced} submissions, {failed} failed",
            "pending_count": self.pending_count(),
        }
