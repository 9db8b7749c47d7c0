"""
Async HTTP client for the Pilot Tracker API.

Procedures are called by name and return their envelope. The typed helpers
raise ``OperationFailed`` when the envelope reports a failure.
"""
import logging
from typing import Any, Optional
from uuid import UUID

import httpx
from pydantic_core import to_jsonable_python

from pilot_tracker.config import get_settings
from pilot_tracker.schemas.result import CreateSiteResult, DimensionsResult, UpdateSiteResult
from pilot_tracker.services.errors import ErrorKind

logger = logging.getLogger(__name__)


class OperationFailed(Exception):
    """A procedure returned ``success: false``."""

    def __init__(self, kind: Optional[ErrorKind], message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class PilotTrackerClient:
    """
    Thin wrapper over ``httpx.AsyncClient``.

    Usage:
        async with PilotTrackerClient(token=token) as client:
            result = await client.create_site(name="North House", ...)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        if http_client is None:
            http_client = httpx.AsyncClient(
                base_url=base_url or get_settings().api_base_url,
                timeout=timeout,
            )
        self._http = http_client
        self._headers = headers

    async def __aenter__(self) -> "PilotTrackerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        response = await self._http.request(
            method,
            path,
            json=to_jsonable_python(json) if json is not None else None,
            headers=self._headers,
        )
        response.raise_for_status()
        return response.json()

    async def rpc(self, name: str, **params: Any) -> dict[str, Any]:
        """Call a procedure by name and return its raw envelope."""
        logger.debug(f"rpc {name}")
        return await self._request("POST", f"/api/rpc/{name}", json=params)

    @staticmethod
    def _raise_on_failure(envelope: dict[str, Any]) -> None:
        if envelope.get("success"):
            return
        kind = envelope.get("error_kind")
        message = envelope.get("error") or envelope.get("message") or "Operation failed"
        raise OperationFailed(ErrorKind(kind) if kind else None, message)

    # -------------------------------------------------------------------------
    # Site procedures
    # -------------------------------------------------------------------------

    async def create_site(self, **params: Any) -> CreateSiteResult:
        envelope = await self.rpc("create_site_without_history", **params)
        self._raise_on_failure(envelope)
        return CreateSiteResult.model_validate(envelope)

    async def update_site_properties(self, site_id: UUID, **fields: Any) -> UpdateSiteResult:
        envelope = await self.rpc("update_site_properties", site_id=site_id, **fields)
        self._raise_on_failure(envelope)
        return UpdateSiteResult.model_validate(envelope)

    async def update_site_dimensions_and_density(
        self,
        site_id: UUID,
        length: float,
        width: float,
        height: float,
        **fields: Any,
    ) -> DimensionsResult:
        envelope = await self.rpc(
            "update_site_dimensions_and_density",
            site_id=site_id,
            length=length,
            width=width,
            height=height,
            **fields,
        )
        self._raise_on_failure(envelope)
        return DimensionsResult.model_validate(envelope)

    # -------------------------------------------------------------------------
    # Reads and submissions
    # -------------------------------------------------------------------------

    async def get_me(self) -> dict[str, Any]:
        return await self._request("GET", "/api/me")

    async def list_programs(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/api/programs")
        return data["programs"]

    async def list_program_sites(self, program_id: UUID) -> list[dict[str, Any]]:
        data = await self._request("GET", f"/api/programs/{program_id}/sites")
        return data["sites"]

    async def list_active_sessions(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/api/sessions/active")
        return data["sessions"]

    async def create_submission(self, site_id: UUID, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", f"/api/sites/{site_id}/submissions", json=payload)
