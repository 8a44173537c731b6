"""Role-based capability checks.

Roles are a closed enum and every permission decision goes through
:func:`can`, so adding a capability or changing who holds it is a one-line
edit to ``_GRANTS``.
"""

from __future__ import annotations

import enum

from pto_tracker.models.enums import Role


class Capability(enum.StrEnum):
    """Actions gated by role."""

    VIEW_DIRECTORY = "VIEW_DIRECTORY"
    MANAGE_TEAM = "MANAGE_TEAM"
    DECIDE_REQUESTS = "DECIDE_REQUESTS"
    ADMINISTER = "ADMINISTER"


_GRANTS: dict[Capability, frozenset[Role]] = {
    Capability.VIEW_DIRECTORY: frozenset({Role.EMPLOYEE, Role.MANAGER, Role.ADMIN}),
    Capability.MANAGE_TEAM: frozenset({Role.MANAGER, Role.ADMIN}),
    Capability.DECIDE_REQUESTS: frozenset({Role.MANAGER, Role.ADMIN}),
    Capability.ADMINISTER: frozenset({Role.ADMIN}),
}


def can(role: Role | str, capability: Capability) -> bool:
    """Return True if ``role`` holds ``capability``. Unknown roles hold nothing."""
    try:
        resolved = Role(str(role).upper())
    except ValueError:
        return False
    return resolved in _GRANTS[capability]


def roles_with(capability: Capability) -> list[Role]:
    """List the roles holding ``capability`` in declaration order."""
    return [role for role in Role if role in _GRANTS[capability]]
