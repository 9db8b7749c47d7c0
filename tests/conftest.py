import uuid
from contextlib import asynccontextmanager

import pytest

from pilot_tracker.models.enums import (
    InteriorWorkingSurfaceType,
    MicrobialRiskZone,
    ProgramStatus,
    SiteType,
)
from pilot_tracker.models.history import ProgramHistory
from pilot_tracker.models.pilot_program import PilotProgram
from pilot_tracker.models.site import Site
from pilot_tracker.models.user import User
from pilot_tracker.services import permissions


class FakeResult:
    """The slice of ``Result`` the services read: scalars, scalar rows and tuple rows."""

    def __init__(self, value):
        self.value = value

    def scalar_one_or_none(self):
        return self.value

    def all(self) -> list:
        return list(self.value)

    def scalars(self) -> "FakeResult":
        return self


class FakeSession:
    """
    In-memory stand-in for AsyncSession covering what the services use.

    ``flush`` assigns primary keys the way the UUID column default would.
    ``execute`` answers queries in order from ``results``; a test queues one
    value per query it expects the code under test to run.
    """

    def __init__(self):
        self.objects: dict[tuple[type, uuid.UUID], object] = {}
        self.added: list[object] = []
        self.flush_count = 0
        self.results: list = []
        self.statements: list = []

    async def execute(self, statement):
        self.statements.append(statement)
        return FakeResult(self.results.pop(0))

    def put(self, obj):
        if getattr(obj, "id", None) is None:
            obj.id = uuid.uuid4()
        self.objects[(type(obj), obj.id)] = obj
        return obj

    async def get(self, model, ident):
        return self.objects.get((model, ident))

    def add(self, obj):
        if obj not in self.added:
            self.added.append(obj)

    async def flush(self):
        self.flush_count += 1
        for obj in self.added:
            self.put(obj)

    @asynccontextmanager
    async def begin_nested(self):
        yield self

    def of_type(self, model) -> list:
        return [obj for obj in self.added if isinstance(obj, model)]

    @property
    def history(self) -> list[ProgramHistory]:
        return self.of_type(ProgramHistory)


@pytest.fixture
def fake_db() -> FakeSession:
    return FakeSession()


@pytest.fixture
def editor(fake_db) -> User:
    return fake_db.put(User(email="editor@example.com", is_company_admin=False, is_active=True))


@pytest.fixture
def program(fake_db) -> PilotProgram:
    return fake_db.put(
        PilotProgram(
            name="Spring Pilot",
            status=ProgramStatus.ACTIVE,
            total_sites=0,
            total_submissions=0,
        )
    )


@pytest.fixture
def site(fake_db, program) -> Site:
    return fake_db.put(
        Site(
            name="North House",
            type=SiteType.GREENHOUSE,
            program_id=program.id,
            length=40.0,
            width=50.0,
            square_footage=2000.0,
            min_efficacious_gasifier_density_sqft_per_bag=2000.0,
            recommended_placement_density_bags=1,
            interior_working_surface_types=[InteriorWorkingSurfaceType.STAINLESS_STEEL],
            microbial_risk_zone=MicrobialRiskZone.MEDIUM,
            hvac_system_present=False,
            has_dead_zones=False,
        )
    )


@pytest.fixture
def allow_edit(monkeypatch):
    """Let every user edit every program."""
    calls = []

    async def fake_require(db, program_id, user, action="update site properties"):
        calls.append((program_id, user.id, action))

    monkeypatch.setattr(permissions, "require_program_editor", fake_require)
    return calls


@pytest.fixture
def deny_edit(monkeypatch):
    async def fake_require(db, program_id, user, action="update site properties"):
        raise permissions.PermissionDeniedError(f"Insufficient permissions to {action}")

    monkeypatch.setattr(permissions, "require_program_editor", fake_require)
