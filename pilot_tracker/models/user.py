"""
User and Company models.

Users are created by the auth provider; the access token's ``sub`` claim
is the user id.
"""
import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pilot_tracker.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from pilot_tracker.models.pilot_program import PilotProgram, ProgramMembership


class Company(Base, UUIDMixin, TimestampMixin):
    """Organisation owning pilot programs."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="company",
    )
    programs: Mapped[list["PilotProgram"]] = relationship(
        "PilotProgram",
        back_populates="company",
    )

    def __repr__(self) -> str:
        return f"<Company {self.name}>"


class User(Base, UUIDMixin, TimestampMixin):
    """
    Application user.

    A user belongs to at most one company. Company admins may edit every
    program owned by their company without a per-program membership.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("companies.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    company: Mapped[Optional["Company"]] = relationship(
        "Company",
        back_populates="users",
    )

    is_company_admin: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    memberships: Mapped[list["ProgramMembership"]] = relationship(
        "ProgramMembership",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
