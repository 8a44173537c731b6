# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from pto_tracker.api.deps import AdminDep, ViewerDep
from pto_tracker.db import SessionDep
from pto_tracker.models.enums import Role
from pto_tracker.schemas.user import CreateUserRequest, UpdateUserRequest, UserListResponse, UserResponse
from pto_tracker.services import user as user_service

users_router = APIRouter(prefix="/users", tags=["users"])


@users_router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserRequest,
    session: SessionDep,
    auth: AdminDep,
) -> UserResponse:
    """Create a user (admin only)."""
    return await user_service.create_user(session, auth, payload)


@users_router.get("", response_model=UserListResponse)
async def list_users(
    session: SessionDep,
    auth: ViewerDep,
    role: Role | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> UserListResponse:
    """List users, optionally filtered by role."""
    return await user_service.list_users(session, role, offset, limit)


@users_router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: ViewerDep,
) -> UserResponse:
    return await user_service.get_user(session, user_id)


@users_router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: uuid.UUID,
    payload: UpdateUserRequest,
    session: SessionDep,
    auth: AdminDep,
) -> UserResponse:
    """Update a user's name, email or role (admin only)."""
    return await user_service.update_user(session, auth, user_id, payload)


@users_router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a user (admin only)."""
    await user_service.delete_user(session, auth, user_id)
