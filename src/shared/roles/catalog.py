"""
Static role catalog.

Every role value read from requests, stored records or display input is
resolved here. Lookups fail closed: anything unrecognized maps to the
least-privileged entry and never raises.
"""

from typing import Any, Dict, Union

from src.shared.exceptions import ValidationFault

from .models import (
    LEAST_PRIVILEGED_ROLE,
    LEAST_PRIVILEGED_TIER,
    MembershipTier,
    OrganizationRole,
    RoleInfo,
    StatusInfo,
)

ROLE_CATALOG: Dict[OrganizationRole, RoleInfo] = {
    OrganizationRole.super_admin: RoleInfo(
        role=OrganizationRole.super_admin,
        display_name="Super Admin",
        description="Organization Owner - Full Control",
        color_tag="red",
        icon="crown",
        rank=5,
        can_invite=True,
        can_manage_all=True,
    ),
    OrganizationRole.admin: RoleInfo(
        role=OrganizationRole.admin,
        display_name="Admin",
        description="Organization Administrator",
        color_tag="purple",
        icon="shield",
        rank=4,
        can_invite=True,
        can_manage_all=False,
    ),
    OrganizationRole.manager: RoleInfo(
        role=OrganizationRole.manager,
        display_name="Manager",
        description="Team Manager - Project Management",
        color_tag="blue",
        icon="users",
        rank=3,
        can_invite=False,
        can_manage_all=False,
    ),
    OrganizationRole.member: RoleInfo(
        role=OrganizationRole.member,
        display_name="Member",
        description="Team Member - Standard Access",
        color_tag="green",
        icon="user",
        rank=2,
        can_invite=False,
        can_manage_all=False,
    ),
    OrganizationRole.viewer: RoleInfo(
        role=OrganizationRole.viewer,
        display_name="Viewer",
        description="Read-Only Access",
        color_tag="gray",
        icon="eye",
        rank=1,
        can_invite=False,
        can_manage_all=False,
    ),
}

INVITATION_STATUS_CATALOG: Dict[str, StatusInfo] = {
    "pending": StatusInfo(
        display_name="Pending",
        description="Waiting for response",
        color_tag="yellow",
        icon="hourglass",
    ),
    "accepted": StatusInfo(
        display_name="Accepted",
        description="User joined the organization",
        color_tag="green",
        icon="check",
    ),
    "declined": StatusInfo(
        display_name="Declined",
        description="User declined the invitation",
        color_tag="red",
        icon="cross",
    ),
    "expired": StatusInfo(
        display_name="Expired",
        description="Invitation has expired",
        color_tag="gray",
        icon="clock",
    ),
    "cancelled": StatusInfo(
        display_name="Cancelled",
        description="Invitation was cancelled",
        color_tag="gray",
        icon="ban",
    ),
}

UNKNOWN_STATUS = StatusInfo(
    display_name="Unknown",
    description="Unknown Status",
    color_tag="gray",
    icon="question",
)


def coerce_role(value: Any) -> OrganizationRole:
    """
    Resolve any value to a known role, falling back to the least-privileged one.

    Used for stored records and display input, where a corrupted or hostile
    value must never be promoted.
    """
    if isinstance(value, OrganizationRole):
        return value
    try:
        return OrganizationRole(str(value))
    except ValueError:
        return LEAST_PRIVILEGED_ROLE


def parse_role(value: Any) -> OrganizationRole:
    """
    Strictly parse a role supplied by a caller.

    Raises:
        ValidationFault: If the value is not a known role
    """
    if isinstance(value, OrganizationRole):
        return value
    try:
        return OrganizationRole(str(value))
    except ValueError:
        raise ValidationFault(f"Unknown role: {value!r}")


def coerce_tier(value: Any) -> MembershipTier:
    if isinstance(value, MembershipTier):
        return value
    try:
        return MembershipTier(str(value))
    except ValueError:
        return LEAST_PRIVILEGED_TIER


def describe(role: Union[OrganizationRole, str, None]) -> RoleInfo:
    """
    Get display metadata for a role.

    Args:
        role: Role enum member or raw role string

    Returns:
        The catalog entry, or the viewer entry for unrecognized input
    """
    return ROLE_CATALOG[coerce_role(role)]


def rank(role: Union[OrganizationRole, str, None]) -> int:
    return describe(role).rank


def is_role_higher(
    role_a: Union[OrganizationRole, str], role_b: Union[OrganizationRole, str]
) -> bool:
    return rank(role_a) > rank(role_b)


def can_manage_role(
    manager_role: Union[OrganizationRole, str],
    target_role: Union[OrganizationRole, str],
) -> bool:
    """A role may manage only roles strictly below it."""
    return is_role_higher(manager_role, target_role)


def can_invite_users(role: Union[OrganizationRole, str, None]) -> bool:
    return describe(role).can_invite


def describe_status(status: Any) -> StatusInfo:
    key = getattr(status, "value", status)
    return INVITATION_STATUS_CATALOG.get(str(key), UNKNOWN_STATUS)
