"""
Pydantic schemas for API request/response models.
"""
from pilot_tracker.schemas.result import (
    CreateSiteResult,
    DimensionsResult,
    OperationResult,
    UpdateSiteResult,
)
from pilot_tracker.schemas.site import (
    EnumTypesResponse,
    SiteCreate,
    SiteDimensionsUpdate,
    SiteListItem,
    SiteListResponse,
    SitePropertiesUpdate,
    SiteResponse,
)
from pilot_tracker.schemas.submission import (
    ActiveSessionListResponse,
    ActiveSessionResponse,
    ProgramListItem,
    ProgramListResponse,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
)

__all__ = [
    # Procedure envelopes
    "OperationResult",
    "CreateSiteResult",
    "UpdateSiteResult",
    "DimensionsResult",
    # Site schemas
    "SiteCreate",
    "SitePropertiesUpdate",
    "SiteDimensionsUpdate",
    "SiteResponse",
    "SiteListItem",
    "SiteListResponse",
    "EnumTypesResponse",
    # Program, submission and session schemas
    "ProgramListItem",
    "ProgramListResponse",
    "SubmissionCreate",
    "SubmissionResponse",
    "SubmissionListResponse",
    "ActiveSessionResponse",
    "ActiveSessionListResponse",
]
