"""
Submission and submission-session models.

A submission is a point-in-time environmental reading for a site. A session
tracks the (possibly shared) work of filling one submission in.
"""
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pilot_tracker.models.base import Base, TimestampMixin, UUIDMixin
from pilot_tracker.models.enums import (
    OdorDistance,
    SessionStatus,
    VentilationStrategy,
    Weather,
    column_enum,
)

if TYPE_CHECKING:
    from pilot_tracker.models.site import Site


class Submission(Base, UUIDMixin, TimestampMixin):
    """Environmental reading taken at a site."""

    __tablename__ = "submissions"

    site_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    site: Mapped["Site"] = relationship(
        "Site",
        back_populates="submissions",
    )
    program_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pilot_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    humidity: Mapped[float] = mapped_column(Float, nullable=False)
    indoor_temperature: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    indoor_humidity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # Was an Open/Closed flag; now the site ventilation classification
    airflow: Mapped[Optional[VentilationStrategy]] = mapped_column(
        column_enum(VentilationStrategy),
        nullable=True,
    )
    odor_distance: Mapped[Optional[OdorDistance]] = mapped_column(
        column_enum(OdorDistance),
        nullable=True,
    )
    weather: Mapped[Optional[Weather]] = mapped_column(
        column_enum(Weather),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    session: Mapped[Optional["SubmissionSession"]] = relationship(
        "SubmissionSession",
        back_populates="submission",
        cascade="all, delete-orphan",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<Submission {self.id} site={self.site_id}>"


class SubmissionSession(Base, UUIDMixin):
    """Work session attached to exactly one submission."""

    __tablename__ = "submission_sessions"

    submission_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("submissions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    submission: Mapped["Submission"] = relationship(
        "Submission",
        back_populates="session",
    )
    site_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("sites.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    program_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pilot_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    opened_by_user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    session_start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    last_activity_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    session_status: Mapped[SessionStatus] = mapped_column(
        column_enum(SessionStatus),
        nullable=False,
        default=SessionStatus.OPENED,
        index=True,
    )
    percentage_complete: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    def __repr__(self) -> str:
        return f"<SubmissionSession {self.id} {self.session_status}>"
