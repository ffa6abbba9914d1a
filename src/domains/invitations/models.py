# src/domains/invitations/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from src.core.authority import Invitation, InvitationStatus
from src.shared.roles import OrganizationRole, describe


class InvitationCreate(BaseModel):
    invitee: str = Field(..., description="User ID or email address of the invitee")
    # Kept as a plain string so unknown roles surface as ValidationFault
    role: str
    message: Optional[str] = Field(None, max_length=1000)

    @field_validator("invitee")
    @classmethod
    def validate_invitee(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Invitee is required")
        return v.strip()


class InvitationReply(BaseModel):
    message: Optional[str] = Field(None, max_length=1000)


class InvitationResponse(BaseModel):
    id: str
    organization_id: str
    inviter_id: str
    invitee_id: str
    invitee_email: Optional[str]
    role: OrganizationRole
    role_display_name: str
    status: InvitationStatus
    message: Optional[str]
    response_message: Optional[str]
    created_at: str
    expires_at: Optional[str]

    @classmethod
    def from_record(
        cls, invitation: Invitation, expires_at: Optional[datetime]
    ) -> "InvitationResponse":
        return cls(
            id=invitation.id,
            organization_id=invitation.organization_id,
            inviter_id=invitation.inviter_id,
            invitee_id=invitation.invitee_id,
            invitee_email=invitation.invitee_email,
            role=invitation.role,
            role_display_name=describe(invitation.role).display_name,
            status=invitation.status,
            message=invitation.message,
            response_message=invitation.response_message,
            created_at=invitation.created_at.isoformat(),
            expires_at=expires_at.isoformat() if expires_at else None,
        )
