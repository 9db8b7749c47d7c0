"""
Program history model - the audit log for changes inside a pilot program.
"""
import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from pilot_tracker.models.base import Base, UUIDMixin
from pilot_tracker.models.enums import HistoryEventType, column_enum


class ProgramHistory(Base, UUIDMixin):
    """
    One audit row per logged change.

    Rows are written explicitly by the service write paths; there is no
    database trigger behind this table.
    """

    __tablename__ = "pilot_program_history"

    event_timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    update_type: Mapped[HistoryEventType] = mapped_column(
        column_enum(HistoryEventType),
        nullable=False,
    )
    object_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False, index=True)
    object_type: Mapped[str] = mapped_column(String(50), nullable=False)
    program_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True, index=True)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True), nullable=True, index=True)
    user_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    old_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    new_data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)

    def __repr__(self) -> str:
        return f"<ProgramHistory {self.update_type} {self.object_type}:{self.object_id}>"
