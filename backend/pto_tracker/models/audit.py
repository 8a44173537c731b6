# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from pto_tracker.models.base import UUIDBase, utc_now
from pto_tracker.models.enums import AuditAction, AuditEntityType


class AuditLog(UUIDBase, table=True):
    """One append-only row per create, update, delete or status transition.

    ``before_json``/``after_json`` hold the entity as serialized by
    :func:`pto_tracker.services.audit.model_to_audit_dict`; creates have no
    before image and deletes no after image.
    """

    __tablename__ = "audit_log"
    __table_args__ = (
        sa.Index("ix_audit_entity", "entity_type", "entity_id"),
        sa.Index("ix_audit_actor_created", "actor_id", "created_at"),
    )

    actor_id: uuid.UUID
    entity_type: AuditEntityType = Field(sa_type=sa.String(50))
    entity_id: uuid.UUID
    action: AuditAction = Field(sa_type=sa.String(50))
    before_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    after_json: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    created_at: datetime = Field(
        default_factory=utc_now,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
