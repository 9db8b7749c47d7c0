"""
Permission gate for program-scoped mutations.

A user may change a program's sites if they hold an Admin or Edit role in
that program, or if they are a company admin of the company owning it.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.models.enums import SITE_EDITOR_ROLES, ProgramRole
from pilot_tracker.models.pilot_program import PilotProgram, ProgramMembership
from pilot_tracker.models.user import User
from pilot_tracker.services.errors import PermissionDeniedError

logger = logging.getLogger(__name__)


def is_editor_role(role: Optional[ProgramRole]) -> bool:
    return role is not None and ProgramRole(role) in SITE_EDITOR_ROLES


def is_company_admin_of(user: User, company_id: Optional[UUID]) -> bool:
    """True if ``user`` administers ``company_id``. Programs without a company have no admins."""
    if company_id is None or not user.is_company_admin:
        return False
    return user.company_id == company_id


async def get_program_role(
    db: AsyncSession,
    program_id: UUID,
    user_id: UUID,
) -> Optional[ProgramRole]:
    """Role of the user in the program, or None if not a member."""
    result = await db.execute(
        select(ProgramMembership.role).where(
            ProgramMembership.program_id == program_id,
            ProgramMembership.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def is_company_admin_for_program(
    db: AsyncSession,
    program_id: UUID,
    user: User,
) -> bool:
    """Check company-admin status against the company owning the program."""
    result = await db.execute(
        select(PilotProgram.company_id).where(PilotProgram.id == program_id)
    )
    return is_company_admin_of(user, result.scalar_one_or_none())


async def can_edit_program(
    db: AsyncSession,
    program_id: UUID,
    user: User,
) -> bool:
    """Admin/Edit membership or company admin."""
    role = await get_program_role(db, program_id, user.id)
    if is_editor_role(role):
        return True
    return await is_company_admin_for_program(db, program_id, user)


async def can_view_program(
    db: AsyncSession,
    program_id: UUID,
    user: User,
) -> bool:
    """Any membership, or any user of the owning company."""
    if await get_program_role(db, program_id, user.id) is not None:
        return True

    result = await db.execute(
        select(PilotProgram.company_id).where(PilotProgram.id == program_id)
    )
    company_id = result.scalar_one_or_none()
    return company_id is not None and user.company_id == company_id


async def require_program_editor(
    db: AsyncSession,
    program_id: UUID,
    user: User,
    action: str = "update site properties",
) -> None:
    """
    Raise PermissionDeniedError unless the user may edit the program.

    Raises:
        PermissionDeniedError: If the user lacks Admin/Edit and is not a company admin
    """
    if not await can_edit_program(db, program_id, user):
        logger.warning(f"User {user.id} denied: {action} in program {program_id}")
        raise PermissionDeniedError(f"Insufficient permissions to {action}")
