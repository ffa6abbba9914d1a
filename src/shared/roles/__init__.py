"""
Organization role catalog.

Usage:
    from src.shared.roles import OrganizationRole, describe

    info = describe(membership.role)
"""

from .catalog import (
    ROLE_CATALOG,
    can_invite_users,
    can_manage_role,
    coerce_role,
    coerce_tier,
    describe,
    describe_status,
    is_role_higher,
    parse_role,
    rank,
)
from .models import (
    LEAST_PRIVILEGED_ROLE,
    LEAST_PRIVILEGED_TIER,
    SUPER_PRIVILEGED_ROLE,
    MembershipTier,
    OrganizationRole,
    RoleInfo,
    StatusInfo,
)

__all__ = [
    "LEAST_PRIVILEGED_ROLE",
    "LEAST_PRIVILEGED_TIER",
    "MembershipTier",
    "OrganizationRole",
    "ROLE_CATALOG",
    "RoleInfo",
    "SUPER_PRIVILEGED_ROLE",
    "StatusInfo",
    "can_invite_users",
    "can_manage_role",
    "coerce_role",
    "coerce_tier",
    "describe",
    "describe_status",
    "is_role_higher",
    "parse_role",
    "rank",
]
