from sqlmodel import SQLModel

from pto_tracker.models.audit import AuditLog
from pto_tracker.models.balance import PTOBalance
from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import AuditAction, AuditEntityType, RequestStatus, Role
from pto_tracker.models.policy import PTOPolicy
from pto_tracker.models.request import PTORequest
from pto_tracker.models.team import Team
from pto_tracker.models.user import User

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "EmployeeProfile",
    "PTOBalance",
    "PTOPolicy",
    "PTORequest",
    "RequestStatus",
    "Role",
    "SQLModel",
    "Team",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
    "User",
]
