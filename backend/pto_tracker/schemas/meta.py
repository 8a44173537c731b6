from __future__ import annotations

from pydantic import BaseModel

from pto_tracker.models.enums import RequestStatus, Role  # noqa: TC001


class RoleListResponse(BaseModel):
    """All roles a user may hold."""

    items: list[Role]


class StatusListResponse(BaseModel):
    """All states a PTO request may be in."""

    items: list[RequestStatus]
