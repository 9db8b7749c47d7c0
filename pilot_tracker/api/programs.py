"""
Pilot program endpoints.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.api.auth import get_current_user
from pilot_tracker.database import get_db
from pilot_tracker.models.pilot_program import PilotProgram, ProgramMembership
from pilot_tracker.models.site import Site
from pilot_tracker.models.user import User
from pilot_tracker.schemas.site import SiteListItem, SiteListResponse
from pilot_tracker.schemas.submission import ProgramListItem, ProgramListResponse
from pilot_tracker.services import permissions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/programs", tags=["Programs"])


@router.get(
    "",
    response_model=ProgramListResponse,
    summary="List programs",
    description="Programs the user is a member of, plus programs of the user's company.",
)
async def list_programs(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProgramListResponse:
    visibility = ProgramMembership.user_id == current_user.id
    if current_user.company_id is not None:
        visibility = or_(visibility, PilotProgram.company_id == current_user.company_id)

    result = await db.execute(
        select(PilotProgram, ProgramMembership.role)
        .outerjoin(
            ProgramMembership,
            (ProgramMembership.program_id == PilotProgram.id)
            & (ProgramMembership.user_id == current_user.id),
        )
        .where(visibility)
        .order_by(PilotProgram.name)
    )
    rows = result.all()

    return ProgramListResponse(
        programs=[
            ProgramListItem(
                id=program.id,
                name=program.name,
                status=program.status,
                start_date=program.start_date,
                end_date=program.end_date,
                total_sites=program.total_sites,
                total_submissions=program.total_submissions,
                role=role,
            )
            for program, role in rows
        ],
        total=len(rows),
    )


@router.get(
    "/{program_id}/sites",
    response_model=SiteListResponse,
    summary="List sites of a program",
)
async def list_program_sites(
    program_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SiteListResponse:
    """
    List sites in a program, ordered by name.

    Returns 404 if the program doesn't exist or isn't visible to the user.
    """
    if not await permissions.can_view_program(db, program_id, current_user):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Program not found",
        )

    result = await db.execute(
        select(Site)
        .where(Site.program_id == program_id)
        .order_by(Site.name)
    )
    sites = result.scalars().all()

    return SiteListResponse(
        sites=[SiteListItem.model_validate(site) for site in sites],
        total=len(sites),
    )
