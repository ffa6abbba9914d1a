# src/domains/organizations/models.py
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from src.core.authority import OrganizationMembership
from src.shared.roles import OrganizationRole, describe


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)


class CreateOrganizationResponse(BaseModel):
    organization_id: str
    name: str
    role: OrganizationRole


class OrganizationMemberResponse(BaseModel):
    user_id: str
    organization_id: str
    role: OrganizationRole
    role_display_name: str
    is_active: bool
    joined_at: str

    @classmethod
    def from_record(
        cls, membership: OrganizationMembership
    ) -> "OrganizationMemberResponse":
        return cls(
            user_id=membership.user_id,
            organization_id=membership.organization_id,
            role=membership.role,
            role_display_name=describe(membership.role).display_name,
            is_active=membership.is_active,
            joined_at=membership.joined_at.isoformat(),
        )


class UpdateOrganizationMemberRequest(BaseModel):
    status: Optional[Literal["removed"]] = None
    # Kept as a plain string so unknown roles surface as ValidationFault
    role: Optional[str] = None

    @model_validator(mode="after")
    def validate_has_update(self) -> "UpdateOrganizationMemberRequest":
        if self.status is None and self.role is None:
            raise ValueError("At least one field must be provided for update")
        if self.status is not None and self.role is not None:
            raise ValueError("Cannot change role and remove a member at once")
        return self
