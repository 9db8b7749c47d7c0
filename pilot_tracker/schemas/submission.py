"""
Pydantic schemas for submissions, programs and sessions.
"""
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from pilot_tracker.models.enums import (
    OdorDistance,
    ProgramRole,
    ProgramStatus,
    SessionStatus,
    VentilationStrategy,
    Weather,
)


class SubmissionCreate(BaseModel):
    """Request schema for recording a submission at a site."""

    temperature: float
    humidity: float = Field(..., ge=0, le=100)
    airflow: Optional[VentilationStrategy] = None
    odor_distance: Optional[OdorDistance] = None
    weather: Optional[Weather] = None
    notes: Optional[str] = Field(None, max_length=2000)
    indoor_temperature: Optional[float] = None
    indoor_humidity: Optional[float] = Field(None, ge=0, le=100)


class SubmissionResponse(BaseModel):
    id: UUID
    site_id: UUID
    program_id: UUID
    temperature: float
    humidity: float
    airflow: Optional[VentilationStrategy] = None
    odor_distance: Optional[OdorDistance] = None
    weather: Optional[Weather] = None
    notes: Optional[str] = None
    indoor_temperature: Optional[float] = None
    indoor_humidity: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionListResponse(BaseModel):
    submissions: list[SubmissionResponse]
    total: int


class ProgramListItem(BaseModel):
    """Program summary including the caller's role (None for company-only access)."""

    id: UUID
    name: str
    status: ProgramStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_sites: int = 0
    total_submissions: int = 0
    role: Optional[ProgramRole] = None


class ProgramListResponse(BaseModel):
    programs: list[ProgramListItem]
    total: int


class ActiveSessionResponse(BaseModel):
    """Active session with the names the session drawer shows."""

    session_id: UUID
    submission_id: UUID
    site_id: UUID
    site_name: str
    program_id: UUID
    program_name: str
    opened_by_user_id: Optional[UUID] = None
    opened_by_user_email: Optional[str] = None
    session_start_time: datetime
    last_activity_time: datetime
    session_status: SessionStatus
    percentage_complete: float


class ActiveSessionListResponse(BaseModel):
    sessions: list[ActiveSessionResponse]
    total: int
