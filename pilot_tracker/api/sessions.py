"""
Submission session endpoints.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.api.auth import get_current_user
from pilot_tracker.database import get_db
from pilot_tracker.models.user import User
from pilot_tracker.schemas.submission import ActiveSessionListResponse, ActiveSessionResponse
from pilot_tracker.services import submission_service

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


@router.get(
    "/active",
    response_model=ActiveSessionListResponse,
    summary="List active sessions",
    description="Sessions visible to the user that are not cancelled or expired.",
)
async def list_active_sessions(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ActiveSessionListResponse:
    rows = await submission_service.list_active_sessions(db, current_user)

    return ActiveSessionListResponse(
        sessions=[
            ActiveSessionResponse(
                session_id=session.id,
                submission_id=session.submission_id,
                site_id=session.site_id,
                site_name=site_name,
                program_id=session.program_id,
                program_name=program_name,
                opened_by_user_id=session.opened_by_user_id,
                opened_by_user_email=opened_by_email,
                session_start_time=session.session_start_time,
                last_activity_time=session.last_activity_time,
                session_status=session.session_status,
                percentage_complete=session.percentage_complete,
            )
            for session, site_name, program_name, opened_by_email in rows
        ],
        total=len(rows),
    )
