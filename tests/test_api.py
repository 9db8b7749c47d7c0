import time
import uuid
from datetime import datetime, timezone

import httpx
import pytest
import pytest_asyncio
from fastapi import HTTPException
from jose import jwt

from pilot_tracker.api import auth
from pilot_tracker.api.auth import get_current_user
from pilot_tracker.client.api_client import OperationFailed, PilotTrackerClient
from pilot_tracker.config import get_settings
from pilot_tracker.database import get_db
from pilot_tracker.main import app
from pilot_tracker.models.enums import ProgramRole, ProgramStatus, SessionStatus
from pilot_tracker.models.submission import SubmissionSession
from pilot_tracker.services.errors import ErrorKind


@pytest.fixture
def api(fake_db, editor):
    """App wired to the in-memory session and a logged-in editor."""

    async def override_db():
        yield fake_db

    async def override_user():
        return editor

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = override_user
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def http(api):
    transport = httpx.ASGITransport(app=api)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_create_site_rpc_returns_envelope(http, program, allow_edit):
    response = await http.post(
        "/api/rpc/create_site_without_history",
        json={
            "name": "South House",
            "type": "Greenhouse",
            "program_id": str(program.id),
            "length": 40,
            "width": 50,
            "interior_working_surface_types": ["Wood"],
            "quantity_deadzones": 2,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["recommended_bags"] == 4
    assert body["square_footage"] == 2000
    assert uuid.UUID(body["site_id"])


@pytest.mark.asyncio
async def test_domain_failure_is_http_200(http, site, deny_edit):
    response = await http.post(
        "/api/rpc/update_site_properties",
        json={"site_id": str(site.id), "num_vents": 3},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Insufficient permissions to update site properties",
        "error": None,
        "error_kind": "permission_denied",
        "recommended_bags": None,
    }


@pytest.mark.asyncio
async def test_malformed_request_rejected(http):
    response = await http.post(
        "/api/rpc/update_site_dimensions_and_density",
        json={"site_id": "not-a-uuid", "length": 1},
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_enum_types_listed(http):
    response = await http.get("/api/sites/enums")

    assert response.status_code == 200
    types = response.json()["types"]
    assert types["site_type_enum"] == ["Greenhouse", "Storage", "Transport", "Production Facility"]
    assert "Expired-Incomplete" in types["session_status_enum"]
    assert types["ventilation_strategy_enum"][0] == "Cross-Ventilation"


@pytest.mark.asyncio
async def test_unauthenticated_request_rejected(fake_db):
    async def override_db():
        yield fake_db

    app.dependency_overrides[get_db] = override_db
    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/api/rpc/update_site_properties", json={"site_id": str(uuid.uuid4())})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated", "status_code": 401}


@pytest.mark.asyncio
async def test_client_raises_operation_failed(api, site, deny_edit):
    transport = httpx.ASGITransport(app=api)
    http_client = httpx.AsyncClient(transport=transport, base_url="http://test")

    async with PilotTrackerClient(http_client=http_client, token="t") as client:
        with pytest.raises(OperationFailed) as excinfo:
            await client.update_site_properties(site.id, num_vents=3)

    assert excinfo.value.kind is ErrorKind.PERMISSION_DENIED


@pytest.mark.asyncio
async def test_client_returns_typed_result(api, site, allow_edit):
    transport = httpx.ASGITransport(app=api)
    http_client = httpx.AsyncClient(transport=transport, base_url="http://test")

    async with PilotTrackerClient(http_client=http_client) as client:
        result = await client.update_site_dimensions_and_density(site.id, 80, 50, 10)

    assert result.success is True
    assert result.square_footage == 4000
    assert result.cubic_footage == 40000
    assert result.recommended_bags == 2


# =============================================================================
# Read endpoints
# =============================================================================


@pytest.mark.asyncio
async def test_list_programs_includes_caller_role(http, fake_db, program):
    fake_db.results = [[(program, ProgramRole.EDIT)]]

    response = await http.get("/api/programs")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    [item] = body["programs"]
    assert item["id"] == str(program.id)
    assert item["name"] == "Spring Pilot"
    assert item["status"] == "active"
    assert item["role"] == "Edit"


@pytest.mark.asyncio
async def test_active_sessions_listed(http, fake_db, editor, site, program):
    now = datetime.now(timezone.utc)
    session = SubmissionSession(
        id=uuid.uuid4(),
        submission_id=uuid.uuid4(),
        site_id=site.id,
        program_id=program.id,
        opened_by_user_id=editor.id,
        session_start_time=now,
        last_activity_time=now,
        session_status=SessionStatus.WORKING,
        percentage_complete=25.0,
    )
    fake_db.results = [[(session, site.name, program.name, editor.email)]]

    response = await http.get("/api/sessions/active")

    assert response.status_code == 200
    [item] = response.json()["sessions"]
    assert item["session_id"] == str(session.id)
    assert item["site_name"] == "North House"
    assert item["program_name"] == "Spring Pilot"
    assert item["opened_by_user_email"] == "editor@example.com"
    assert item["session_status"] == "Working"


@pytest.mark.asyncio
async def test_get_site_visible_to_member(http, fake_db, site):
    site.created_at = site.updated_at = datetime.now(timezone.utc)
    fake_db.results = [ProgramRole.READ_ONLY]

    response = await http.get(f"/api/sites/{site.id}")

    assert response.status_code == 200
    assert response.json()["square_footage"] == 2000


@pytest.mark.asyncio
async def test_get_site_hidden_from_outsiders(http, fake_db, site):
    # Not a member, and the program has no company
    fake_db.results = [None, None]

    response = await http.get(f"/api/sites/{site.id}")

    assert response.status_code == 404
    assert response.json() == {"error": "Site not found", "status_code": 404}


@pytest.mark.asyncio
async def test_submission_to_inactive_program_is_422(http, fake_db, site, program):
    program.status = ProgramStatus.INACTIVE
    fake_db.results = [ProgramRole.RESPOND]

    response = await http.post(
        f"/api/sites/{site.id}/submissions",
        json={"temperature": 70, "humidity": 40},
    )

    assert response.status_code == 422
    assert response.json()["error"] == "Program is not active"


# =============================================================================
# Token decoding
# =============================================================================


@pytest.fixture
def jwt_secret(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "jwt_secret", "test-secret")
    return settings


def _token(settings, **claims) -> str:
    payload = {
        "sub": str(uuid.uuid4()),
        "aud": settings.jwt_audience,
        "exp": int(time.time()) + 600,
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def test_decode_valid_token(jwt_secret):
    user_id = uuid.uuid4()

    payload = auth.decode_token(_token(jwt_secret, sub=str(user_id), email="a@example.com"))

    assert payload.sub == user_id
    assert payload.email == "a@example.com"


def test_decode_expired_token(jwt_secret):
    with pytest.raises(HTTPException) as excinfo:
        auth.decode_token(_token(jwt_secret, exp=int(time.time()) - 10))

    assert excinfo.value.status_code == 401
    assert excinfo.value.detail == "Token has expired"


def test_decode_wrong_audience(jwt_secret):
    with pytest.raises(HTTPException) as excinfo:
        auth.decode_token(_token(jwt_secret, aud="someone-else"))

    assert excinfo.value.detail == "Invalid token"
