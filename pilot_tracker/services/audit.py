"""
Audit logging for program-scoped changes.

History rows are written by the service write paths themselves, so a
caller that must not be audited passes ``skip_audit=True`` instead of
toggling anything database-wide.
"""
import logging
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.models.base import Base
from pilot_tracker.models.enums import HistoryEventType
from pilot_tracker.models.history import ProgramHistory
from pilot_tracker.models.user import User

logger = logging.getLogger(__name__)


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    return value


def snapshot(obj: Base) -> dict[str, Any]:
    """
    JSON-safe dict of an ORM object's loaded column values.

    Reads instance state directly; expired attributes are left out rather
    than lazy-loaded.
    """
    state = inspect(obj)
    loaded = state.dict
    return {
        attr.key: _json_value(loaded[attr.key])
        for attr in state.mapper.column_attrs
        if attr.key in loaded
    }


def record_history(
    db: AsyncSession,
    *,
    event: HistoryEventType,
    object_id: uuid.UUID,
    object_type: str,
    program_id: Optional[uuid.UUID],
    actor: Optional[User],
    old_data: Optional[dict[str, Any]] = None,
    new_data: Optional[dict[str, Any]] = None,
) -> ProgramHistory:
    """Add a history row to the current transaction."""
    entry = ProgramHistory(
        update_type=event,
        object_id=object_id,
        object_type=object_type,
        program_id=program_id,
        user_id=actor.id if actor else None,
        user_email=actor.email if actor else None,
        old_data=old_data,
        new_data=new_data,
    )
    db.add(entry)
    logger.debug(f"Audit {event.value} for {object_type} {object_id}")
    return entry
