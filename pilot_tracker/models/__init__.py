"""
SQLAlchemy models for Pilot Tracker.
"""
from pilot_tracker.models.base import Base, TimestampMixin, UUIDMixin
from pilot_tracker.models.enums import (
    ConstructionMaterial,
    HistoryEventType,
    HVACSystemType,
    InsulationType,
    InteriorWorkingSurfaceType,
    IrrigationSystemType,
    LightingSystem,
    MicrobialRiskZone,
    OdorDistance,
    PrimaryFunction,
    ProgramRole,
    ProgramStatus,
    SessionStatus,
    SiteType,
    VentilationStrategy,
    VentPlacement,
    Weather,
)
from pilot_tracker.models.history import ProgramHistory
from pilot_tracker.models.pilot_program import PilotProgram, ProgramMembership
from pilot_tracker.models.site import Site
from pilot_tracker.models.submission import Submission, SubmissionSession
from pilot_tracker.models.user import Company, User

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Models
    "Company",
    "User",
    "PilotProgram",
    "ProgramMembership",
    "Site",
    "Submission",
    "SubmissionSession",
    "ProgramHistory",
    # Enums
    "SiteType",
    "ProgramStatus",
    "ProgramRole",
    "InteriorWorkingSurfaceType",
    "MicrobialRiskZone",
    "VentilationStrategy",
    "PrimaryFunction",
    "ConstructionMaterial",
    "InsulationType",
    "HVACSystemType",
    "IrrigationSystemType",
    "LightingSystem",
    "VentPlacement",
    "OdorDistance",
    "Weather",
    "SessionStatus",
    "HistoryEventType",
]
