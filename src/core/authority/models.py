"""Persisted record shapes owned by the membership/invitation authority."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from src.shared.roles import OrganizationRole, coerce_role


class InvitationStatus(str, Enum):
    pending = "pending"  # Invitation sent, waiting for response
    accepted = "accepted"  # User accepted the invitation
    declined = "declined"  # User declined the invitation
    cancelled = "cancelled"  # Invitation cancelled by sender
    expired = "expired"  # Invitation expired


def as_utc(value: datetime) -> datetime:
    """Timestamps without an offset are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OrganizationMembership(BaseModel):
    user_id: str
    organization_id: str
    role: OrganizationRole
    joined_at: datetime
    is_active: bool = True

    @field_validator("role", mode="before")
    @classmethod
    def fail_closed_role(cls, v: Any) -> OrganizationRole:
        return coerce_role(v)

    @field_validator("joined_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class Invitation(BaseModel):
    id: str
    organization_id: str
    inviter_id: str
    invitee_id: str
    invitee_email: Optional[str] = None
    role: OrganizationRole
    status: InvitationStatus
    created_at: datetime
    message: Optional[str] = None
    response_message: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def fail_closed_role(cls, v: Any) -> OrganizationRole:
        return coerce_role(v)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class InvitationFilter(BaseModel):
    """Filter for listing invitations; unset fields match everything."""

    organization_id: Optional[str] = Field(None, description="Organization ID")
    invitee_id: Optional[str] = Field(None, description="Invited user ID or email")
    inviter_id: Optional[str] = Field(None, description="Inviting user ID")
    statuses: Optional[List[InvitationStatus]] = Field(
        None, description="Invitation statuses to filter by"
    )

    def matches(self, invitation: Invitation) -> bool:
        if self.organization_id and invitation.organization_id != self.organization_id:
            return False
        if self.invitee_id and invitation.invitee_id != self.invitee_id:
            return False
        if self.inviter_id and invitation.inviter_id != self.inviter_id:
            return False
        if self.statuses is not None and invitation.status not in self.statuses:
            return False
        return True
