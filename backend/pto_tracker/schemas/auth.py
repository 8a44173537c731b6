# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from pto_tracker.models.enums import Role


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    user_id: uuid.UUID
    role: Role = Role.EMPLOYEE
