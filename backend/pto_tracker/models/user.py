from __future__ import annotations

from sqlmodel import Field

from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from pto_tracker.models.enums import Role


class User(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """A person who can sign in; employees, managers and admins alike."""

    __tablename__ = "app_user"

    name: str = Field(max_length=255)
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    role: str = Field(default=Role.EMPLOYEE, max_length=50, sa_column_kwargs={"server_default": "EMPLOYEE"})
