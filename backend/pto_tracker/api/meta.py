from __future__ import annotations

from fastapi import APIRouter

from pto_tracker.models.enums import RequestStatus, Role
from pto_tracker.schemas.meta import RoleListResponse, StatusListResponse

meta_router = APIRouter(tags=["meta"])


@meta_router.get("/roles", response_model=RoleListResponse)
async def list_roles() -> RoleListResponse:
    """Enumerate the user roles."""
    return RoleListResponse(items=list(Role))


@meta_router.get("/statuses", response_model=StatusListResponse)
async def list_statuses() -> StatusListResponse:
    """Enumerate the PTO request statuses."""
    return StatusListResponse(items=list(RequestStatus))
