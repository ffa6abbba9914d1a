from enum import Enum

from pydantic import BaseModel, ConfigDict


class OrganizationRole(str, Enum):
    """
    Fine-grained organization roles used for display and permission checks.

    super_admin is the organization owner and bypasses every permission level.
    """

    super_admin = "super_admin"
    admin = "admin"
    manager = "manager"
    member = "member"
    viewer = "viewer"


class MembershipTier(str, Enum):
    """Coarse membership tiers used by the task assignment rules."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


SUPER_PRIVILEGED_ROLE = OrganizationRole.super_admin
LEAST_PRIVILEGED_ROLE = OrganizationRole.viewer
LEAST_PRIVILEGED_TIER = MembershipTier.MEMBER


class RoleInfo(BaseModel):
    """Display metadata and seniority for a role."""

    model_config = ConfigDict(frozen=True)

    role: OrganizationRole
    display_name: str
    description: str
    color_tag: str
    icon: str
    rank: int
    can_invite: bool
    can_manage_all: bool


class StatusInfo(BaseModel):
    """Display metadata for an invitation status."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    description: str
    color_tag: str
    icon: str
