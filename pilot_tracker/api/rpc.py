"""
Procedure endpoints.

Each endpoint calls one site procedure and returns its envelope. Domain
failures come back with HTTP 200 and ``success: false``; clients branch
on ``success`` and ``error_kind``.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.api.auth import get_current_user
from pilot_tracker.database import get_db
from pilot_tracker.models.user import User
from pilot_tracker.schemas.result import CreateSiteResult, DimensionsResult, UpdateSiteResult
from pilot_tracker.schemas.site import SiteCreate, SiteDimensionsUpdate, SitePropertiesUpdate
from pilot_tracker.services import site_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rpc", tags=["Procedures"])


@router.post(
    "/create_site_without_history",
    response_model=CreateSiteResult,
    summary="Create a site",
    description="Create a site with derived footage and gasifier bag recommendation, without a history entry.",
)
async def create_site_without_history(
    request: SiteCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CreateSiteResult:
    return await site_service.create_site_without_history(db, current_user, request)


@router.post(
    "/update_site_properties",
    response_model=UpdateSiteResult,
    summary="Update site properties",
    description="Merge-patch site properties; recomputes the bag recommendation when its inputs change.",
)
async def update_site_properties(
    request: SitePropertiesUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UpdateSiteResult:
    return await site_service.update_site_properties(db, current_user, request)


@router.post(
    "/update_site_dimensions_and_density",
    response_model=DimensionsResult,
    summary="Update site dimensions and density",
)
async def update_site_dimensions_and_density(
    request: SiteDimensionsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DimensionsResult:
    """
    Replace length, width, height and density.

    Square/cubic footage and the bag recommendation are re-derived.
    """
    return await site_service.update_site_dimensions_and_density(db, current_user, request)
