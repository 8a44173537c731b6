from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from pto_tracker.models.audit import AuditLog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from pto_tracker.models.enums import AuditAction, AuditEntityType

# Columns that must never be copied into the audit trail.
_REDACTED_FIELDS = frozenset({"password_hash"})
# Refreshed on every write; excluded from change lists.
_UNTRACKED_FIELDS = frozenset({"updated_at"})


def _to_json_value(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    return value


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a table row to a JSON-safe dict, minus redacted columns."""
    return {
        key: _to_json_value(value) for key, value in model.model_dump().items() if key not in _REDACTED_FIELDS
    }


def changed_fields(before: dict[str, Any] | None, after: dict[str, Any] | None) -> list[str]:
    """Sorted keys whose value differs between two audit images.

    A create or delete reports every key of the image that exists.
    """
    before = before or {}
    after = after or {}
    keys = (before.keys() | after.keys()) - _UNTRACKED_FIELDS
    return sorted(key for key in keys if before.get(key) != after.get(key))


async def write_audit_log(
    session: AsyncSession,
    *,
    actor_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Write an immutable audit log entry within the caller's transaction."""
    entry = AuditLog(
        actor_id=actor_id,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry
