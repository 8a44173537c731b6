# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Annotated, Self

from pydantic import AfterValidator, BaseModel, Field, model_validator

from pto_tracker.models.enums import RequestStatus
from pto_tracker.schemas.user import UserSummary


def ensure_utc(value: datetime) -> datetime:
    """Normalize to UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]

_INITIAL_STATUSES = frozenset({RequestStatus.DRAFT, RequestStatus.SUBMITTED})

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateRequestPayload(BaseModel):
    """Request body for creating a PTO request."""

    employee_id: uuid.UUID
    start_date: UTCDateTime
    end_date: UTCDateTime
    hours: float = Field(gt=0)
    status: RequestStatus = RequestStatus.DRAFT
    note: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _validate_payload(self) -> Self:
        if self.end_date <= self.start_date:
            msg = "start_date must be before end_date"
            raise ValueError(msg)
        if self.status not in _INITIAL_STATUSES:
            msg = "new requests must be DRAFT or SUBMITTED"
            raise ValueError(msg)
        return self


class UpdateRequestPayload(BaseModel):
    """Partial edit of a DRAFT or SUBMITTED request."""

    start_date: UTCDateTime | None = None
    end_date: UTCDateTime | None = None
    hours: float | None = Field(default=None, gt=0)
    note: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.start_date is not None and self.end_date is not None and self.end_date <= self.start_date:
            msg = "start_date must be before end_date"
            raise ValueError(msg)
        return self


class DecisionPayload(BaseModel):
    """Request body for approve/reject actions.

    ``approver_id`` defaults to the calling user.
    """

    approver_id: uuid.UUID | None = None
    note: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestResponse(BaseModel):
    """Response schema for a single PTO request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    start_date: datetime
    end_date: datetime
    hours: float
    status: RequestStatus
    approver: UserSummary | None
    note: str | None
    created_at: datetime
    updated_at: datetime


class RequestListResponse(BaseModel):
    """Paginated list of PTO requests."""

    items: list[RequestResponse]
    total: int
