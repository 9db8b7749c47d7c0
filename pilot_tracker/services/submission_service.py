"""
Submission recording and session queries.
"""
import logging
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.models.enums import (
    TERMINAL_SESSION_STATUSES,
    HistoryEventType,
    ProgramRole,
    ProgramStatus,
    SessionStatus,
)
from pilot_tracker.models.pilot_program import PilotProgram, ProgramMembership
from pilot_tracker.models.site import Site
from pilot_tracker.models.submission import Submission, SubmissionSession
from pilot_tracker.models.user import User
from pilot_tracker.schemas.submission import SubmissionCreate
from pilot_tracker.services import permissions
from pilot_tracker.services.audit import record_history, snapshot
from pilot_tracker.services.errors import NotFoundError, PermissionDeniedError, ValidationFailureError

logger = logging.getLogger(__name__)

# ReadOnly members can look but not submit
SUBMITTER_ROLES = (ProgramRole.ADMIN, ProgramRole.EDIT, ProgramRole.RESPOND)


async def create_submission(
    db: AsyncSession,
    actor: User,
    site_id: UUID,
    data: SubmissionCreate,
) -> Submission:
    """
    Record a submission for a site and open its work session.

    Raises:
        NotFoundError: If the site doesn't exist
        PermissionDeniedError: If the user can't submit in the site's program
        ValidationFailureError: If the program is not active
    """
    site = await db.get(Site, site_id)
    if site is None:
        raise NotFoundError("Site not found")

    program = await db.get(PilotProgram, site.program_id)
    role = await permissions.get_program_role(db, site.program_id, actor.id)
    if role not in SUBMITTER_ROLES and not permissions.is_company_admin_of(actor, program.company_id):
        raise PermissionDeniedError("Insufficient permissions to create submissions")

    if program.status != ProgramStatus.ACTIVE:
        raise ValidationFailureError("Program is not active")

    submission = Submission(
        site_id=site.id,
        program_id=program.id,
        created_by=actor.id,
        **data.model_dump(),
    )
    db.add(submission)
    await db.flush()

    session = SubmissionSession(
        submission_id=submission.id,
        site_id=site.id,
        program_id=program.id,
        opened_by_user_id=actor.id,
        session_status=SessionStatus.OPENED,
        percentage_complete=0.0,
    )
    db.add(session)
    program.total_submissions = (program.total_submissions or 0) + 1

    record_history(
        db,
        event=HistoryEventType.SUBMISSION_CREATION,
        object_id=submission.id,
        object_type="submission",
        program_id=program.id,
        actor=actor,
        new_data=snapshot(submission),
    )
    await db.flush()

    logger.info(f"Created submission {submission.id} for site {site.id}")
    return submission


async def list_active_sessions(db: AsyncSession, user: User) -> list[tuple]:
    """
    Non-terminal sessions in programs the user can see.

    Returns rows of (SubmissionSession, site name, program name, opener email).
    """
    member_programs = select(ProgramMembership.program_id).where(
        ProgramMembership.user_id == user.id
    )
    visibility = PilotProgram.id.in_(member_programs)
    if user.company_id is not None:
        visibility = or_(visibility, PilotProgram.company_id == user.company_id)

    result = await db.execute(
        select(SubmissionSession, Site.name, PilotProgram.name, User.email)
        .join(Site, Site.id == SubmissionSession.site_id)
        .join(PilotProgram, PilotProgram.id == SubmissionSession.program_id)
        .outerjoin(User, User.id == SubmissionSession.opened_by_user_id)
        .where(
            visibility,
            SubmissionSession.session_status.not_in(TERMINAL_SESSION_STATUSES),
        )
        .order_by(SubmissionSession.last_activity_time.desc())
    )
    return list(result.all())
