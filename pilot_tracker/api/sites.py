"""
Site read endpoints and site submissions.

Site mutations go through the procedure endpoints in ``api.rpc``.
"""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.api.auth import get_current_user
from pilot_tracker.database import get_db
from pilot_tracker.models.enums import PG_ENUM_NAMES
from pilot_tracker.models.site import Site
from pilot_tracker.models.submission import Submission
from pilot_tracker.models.user import User
from pilot_tracker.schemas.site import EnumTypesResponse, SiteResponse
from pilot_tracker.schemas.submission import (
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
)
from pilot_tracker.services import permissions, submission_service
from pilot_tracker.services.errors import ErrorKind, SiteOperationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sites", tags=["Sites"])

_STATUS_FOR_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION_FAILURE: 422,
}


async def _get_visible_site(db: AsyncSession, site_id: UUID, user: User) -> Site:
    """Load a site the user may see; 404 otherwise so existence isn't leaked."""
    site = await db.get(Site, site_id)
    if not site or not await permissions.can_view_program(db, site.program_id, user):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Site not found",
        )
    return site


# =============================================================================
# Enumerated types (must be BEFORE /{site_id} to avoid path conflict)
# =============================================================================


@router.get(
    "/enums",
    response_model=EnumTypesResponse,
    summary="Get enumerated types",
    description="Returns every enumerated type of the API with its allowed values.",
)
async def get_enum_types() -> EnumTypesResponse:
    """
    Enumerated types keyed by their database type name.

    Static, so no authentication is required.
    """
    return EnumTypesResponse(
        types={
            type_name: [member.value for member in enum_cls]
            for enum_cls, type_name in PG_ENUM_NAMES.items()
        }
    )


@router.get(
    "/{site_id}",
    response_model=SiteResponse,
    summary="Get site details",
)
async def get_site(
    site_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SiteResponse:
    """
    Get site details by ID.

    Returns 404 if the site doesn't exist or its program isn't visible to the user.
    """
    site = await _get_visible_site(db, site_id, current_user)
    return SiteResponse.model_validate(site)


# =============================================================================
# Submissions
# =============================================================================


@router.post(
    "/{site_id}/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a submission",
)
async def create_submission(
    site_id: UUID,
    request: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SubmissionResponse:
    """Record an environmental reading for a site and open its session."""
    try:
        submission = await submission_service.create_submission(
            db, current_user, site_id, request
        )
    except SiteOperationError as e:
        raise HTTPException(
            status_code=_STATUS_FOR_KIND.get(e.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=e.message,
        )

    # Load server-side defaults (created_at)
    await db.refresh(submission)
    return SubmissionResponse.model_validate(submission)


@router.get(
    "/{site_id}/submissions",
    response_model=SubmissionListResponse,
    summary="List submissions of a site",
)
async def list_submissions(
    site_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SubmissionListResponse:
    """Submissions of a site, newest first."""
    site = await _get_visible_site(db, site_id, current_user)

    result = await db.execute(
        select(Submission)
        .where(Submission.site_id == site.id)
        .order_by(Submission.created_at.desc())
    )
    submissions = result.scalars().all()

    return SubmissionListResponse(
        submissions=[SubmissionResponse.model_validate(s) for s in submissions],
        total=len(submissions),
    )
