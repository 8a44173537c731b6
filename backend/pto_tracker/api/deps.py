# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, status

from pto_tracker.exceptions import AppError
from pto_tracker.models.enums import Role
from pto_tracker.rbac import Capability, can
from pto_tracker.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: str = Header(default=Role.EMPLOYEE.value),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    try:
        role = Role(x_role.upper())
    except ValueError:
        raise AppError(f"Unknown role: {x_role}", status_code=status.HTTP_403_FORBIDDEN) from None
    return AuthContext(user_id=x_user_id, role=role)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


def require_capability(capability: Capability) -> Callable[[AuthContext], Awaitable[AuthContext]]:
    """Build a dependency that rejects callers whose role lacks ``capability``."""

    async def _dependency(auth: AuthDep) -> AuthContext:
        if not can(auth.role, capability):
            label = capability.value.replace("_", " ").capitalize()
            raise AppError(f"{label} access required", status_code=status.HTTP_403_FORBIDDEN)
        return auth

    return _dependency


ViewerDep = Annotated[AuthContext, Depends(require_capability(Capability.VIEW_DIRECTORY))]
ManagerDep = Annotated[AuthContext, Depends(require_capability(Capability.MANAGE_TEAM))]
ApproverDep = Annotated[AuthContext, Depends(require_capability(Capability.DECIDE_REQUESTS))]
AdminDep = Annotated[AuthContext, Depends(require_capability(Capability.ADMINISTER))]
