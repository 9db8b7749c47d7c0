"""
Pilot program model - groups sites under one trial, plus per-user membership.
"""
import uuid
from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pilot_tracker.models.base import Base, TimestampMixin, UUIDMixin
from pilot_tracker.models.enums import ProgramRole, ProgramStatus, column_enum

if TYPE_CHECKING:
    from pilot_tracker.models.site import Site
    from pilot_tracker.models.user import Company, User


class PilotProgram(Base, UUIDMixin, TimestampMixin):
    """
    Pilot program owning a set of sites.

    ``total_sites`` and ``total_submissions`` are denormalized counters
    kept up to date by the write paths.
    """

    __tablename__ = "pilot_programs"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[ProgramStatus] = mapped_column(
        column_enum(ProgramStatus),
        nullable=False,
        default=ProgramStatus.ACTIVE,
    )

    total_sites: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_submissions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    company: Mapped[Optional["Company"]] = relationship(
        "Company",
        back_populates="programs",
    )

    sites: Mapped[list["Site"]] = relationship(
        "Site",
        back_populates="program",
        cascade="all, delete-orphan",
    )
    memberships: Mapped[list["ProgramMembership"]] = relationship(
        "ProgramMembership",
        back_populates="program",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<PilotProgram {self.name}>"


class ProgramMembership(Base, UUIDMixin, TimestampMixin):
    """A user's role within one pilot program."""

    __tablename__ = "pilot_program_users"
    __table_args__ = (
        UniqueConstraint("program_id", "user_id", name="uq_pilot_program_users_program_user"),
    )

    program_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pilot_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    program: Mapped["PilotProgram"] = relationship(
        "PilotProgram",
        back_populates="memberships",
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user: Mapped["User"] = relationship(
        "User",
        back_populates="memberships",
    )

    role: Mapped[ProgramRole] = mapped_column(
        column_enum(ProgramRole),
        nullable=False,
        default=ProgramRole.RESPOND,
    )

    def __repr__(self) -> str:
        return f"<ProgramMembership {self.user_id} {self.role}>"
