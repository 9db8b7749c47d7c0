"""
Result envelopes returned by the site procedures.

Procedures never fail at the transport level for domain errors; callers
branch on ``success`` and, when it is false, on ``error_kind``.
"""
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from pilot_tracker.services.errors import ErrorKind


class OperationResult(BaseModel):
    """Common envelope: success flag, human message, error discriminator."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = Field(None, description="Failure message (create procedures)")
    error_kind: Optional[ErrorKind] = Field(None, description="Set only when success is false")


class CreateSiteResult(OperationResult):
    """Envelope for create_site_without_history."""

    site_id: Optional[UUID] = None
    square_footage: Optional[float] = None
    cubic_footage: Optional[float] = None
    recommended_bags: Optional[int] = None


class UpdateSiteResult(OperationResult):
    """Envelope for update_site_properties."""

    recommended_bags: Optional[int] = Field(
        None, description="Stored recommendation after the update"
    )


class DimensionsResult(OperationResult):
    """Envelope for update_site_dimensions_and_density."""

    square_footage: Optional[float] = None
    cubic_footage: Optional[float] = None
    recommended_bags: Optional[int] = None
