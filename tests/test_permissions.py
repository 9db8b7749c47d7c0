import uuid

import pytest

from pilot_tracker.models.enums import ProgramRole
from pilot_tracker.models.user import User
from pilot_tracker.schemas.site import SitePropertiesUpdate
from pilot_tracker.services import permissions, site_service
from pilot_tracker.services.errors import ErrorKind, PermissionDeniedError


def _user(company_id=None, is_company_admin=False) -> User:
    return User(
        id=uuid.uuid4(),
        email="grower@example.com",
        company_id=company_id,
        is_company_admin=is_company_admin,
    )


@pytest.mark.parametrize(
    "role, expected",
    [
        (ProgramRole.ADMIN, True),
        (ProgramRole.EDIT, True),
        (ProgramRole.RESPOND, False),
        (ProgramRole.READ_ONLY, False),
        ("Edit", True),
        (None, False),
    ],
)
def test_editor_roles(role, expected):
    assert permissions.is_editor_role(role) is expected


def test_company_admin_of_own_company():
    company_id = uuid.uuid4()
    assert permissions.is_company_admin_of(_user(company_id, True), company_id)


def test_company_admin_of_other_company():
    assert not permissions.is_company_admin_of(_user(uuid.uuid4(), True), uuid.uuid4())


def test_plain_user_is_not_company_admin():
    company_id = uuid.uuid4()
    assert not permissions.is_company_admin_of(_user(company_id, False), company_id)


def test_program_without_company_has_no_admins():
    assert not permissions.is_company_admin_of(_user(None, True), None)


@pytest.mark.asyncio
async def test_require_program_editor_raises_for_non_editor(monkeypatch):
    async def fake_can_edit(db, program_id, user):
        return False

    monkeypatch.setattr(permissions, "can_edit_program", fake_can_edit)

    with pytest.raises(PermissionDeniedError) as excinfo:
        await permissions.require_program_editor(None, uuid.uuid4(), _user())

    assert excinfo.value.kind is ErrorKind.PERMISSION_DENIED
    assert excinfo.value.message == "Insufficient permissions to update site properties"


@pytest.mark.asyncio
async def test_require_program_editor_passes_for_editor(monkeypatch):
    async def fake_can_edit(db, program_id, user):
        return True

    monkeypatch.setattr(permissions, "can_edit_program", fake_can_edit)

    await permissions.require_program_editor(None, uuid.uuid4(), _user())


# =============================================================================
# Gate against the membership and company lookups
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "role, admin_of_program_company, allowed",
    [
        (ProgramRole.READ_ONLY, False, False),
        (ProgramRole.RESPOND, True, True),
        (None, False, False),
        (ProgramRole.EDIT, False, True),
    ],
    ids=["read-only-member", "respond-company-admin", "admin-of-other-company", "edit-member"],
)
async def test_update_gated_by_role_and_company(
    fake_db, editor, site, program, role, admin_of_program_company, allowed
):
    program.company_id = uuid.uuid4()
    editor.is_company_admin = True
    editor.company_id = program.company_id if admin_of_program_company else uuid.uuid4()
    # Role lookup first; the company lookup only runs for non-editor roles
    fake_db.results = [role, program.company_id]

    result = await site_service.update_site_properties(
        fake_db, editor, SitePropertiesUpdate(site_id=site.id, num_vents=5)
    )

    assert result.success is allowed
    if allowed:
        assert site.num_vents == 5
    else:
        assert result.error_kind is ErrorKind.PERMISSION_DENIED
        assert result.message == "Insufficient permissions to update site properties"
        assert site.num_vents is None
        assert fake_db.history == []


@pytest.mark.asyncio
async def test_editor_role_skips_company_lookup(fake_db, editor, program):
    fake_db.results = [ProgramRole.ADMIN]

    assert await permissions.can_edit_program(fake_db, program.id, editor) is True
    assert len(fake_db.statements) == 1
