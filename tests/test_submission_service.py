import uuid

import pytest

from pilot_tracker.models.enums import HistoryEventType, ProgramRole, ProgramStatus, SessionStatus
from pilot_tracker.models.submission import Submission, SubmissionSession
from pilot_tracker.schemas.submission import SubmissionCreate
from pilot_tracker.services import permissions, submission_service
from pilot_tracker.services.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailureError,
)


@pytest.fixture
def role(monkeypatch):
    """Set the caller's program role for a test via ``role.value``."""

    class Role:
        value = ProgramRole.RESPOND

    async def fake_get_program_role(db, program_id, user_id):
        return Role.value

    monkeypatch.setattr(permissions, "get_program_role", fake_get_program_role)
    return Role


READING = SubmissionCreate(temperature=72.0, humidity=45.0, weather="Clear", airflow="Positive Pressure")


@pytest.mark.asyncio
async def test_respond_role_records_submission_and_opens_session(fake_db, editor, site, program, role):
    submission = await submission_service.create_submission(fake_db, editor, site.id, READING)

    assert submission.site_id == site.id
    assert submission.program_id == program.id
    assert submission.created_by == editor.id
    assert program.total_submissions == 1

    [session] = fake_db.of_type(SubmissionSession)
    assert session.submission_id == submission.id
    assert session.session_status is SessionStatus.OPENED
    assert session.opened_by_user_id == editor.id

    [entry] = fake_db.history
    assert entry.update_type is HistoryEventType.SUBMISSION_CREATION
    assert entry.new_data["weather"] == "Clear"


@pytest.mark.asyncio
async def test_read_only_member_cannot_submit(fake_db, editor, site, role):
    role.value = ProgramRole.READ_ONLY

    with pytest.raises(PermissionDeniedError):
        await submission_service.create_submission(fake_db, editor, site.id, READING)

    assert fake_db.of_type(Submission) == []


@pytest.mark.asyncio
async def test_company_admin_can_submit_without_membership(fake_db, editor, site, program, role):
    role.value = None
    program.company_id = uuid.uuid4()
    editor.company_id = program.company_id
    editor.is_company_admin = True

    submission = await submission_service.create_submission(fake_db, editor, site.id, READING)

    assert submission.program_id == program.id


@pytest.mark.asyncio
async def test_inactive_program_rejects_submissions(fake_db, editor, site, program, role):
    program.status = ProgramStatus.INACTIVE

    with pytest.raises(ValidationFailureError):
        await submission_service.create_submission(fake_db, editor, site.id, READING)


@pytest.mark.asyncio
async def test_unknown_site(fake_db, editor, role):
    with pytest.raises(NotFoundError):
        await submission_service.create_submission(fake_db, editor, uuid.uuid4(), READING)
