# src/domains/organizations/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from src.core.authority import AuthorityStore, get_authority
from src.domains.access.models import AccessDecision
from src.domains.auth.dependencies import get_current_user_id
from src.domains.organizations.models import (
    CreateOrganizationResponse,
    OrganizationCreate,
    OrganizationMemberResponse,
    UpdateOrganizationMemberRequest,
)
from src.domains.organizations.service import OrganizationService
from src.shared.permissions import Capability, require_capability

router = APIRouter(prefix="/organizations", tags=["Organizations"])


@router.post(
    "",
    response_model=CreateOrganizationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createOrganization",
)
async def create_organization(
    organization_data: OrganizationCreate,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> CreateOrganizationResponse:
    """Create a new organization and add the current user as super admin."""
    service = OrganizationService(authority)
    return await service.create_organization(organization_data, user_id)


@router.get(
    "/{org_id}/members",
    response_model=List[OrganizationMemberResponse],
    operation_id="getOrganizationMembers",
)
async def get_organization_members(
    org_id: str,
    decision: AccessDecision = Depends(require_capability(Capability.VIEW_MEMBERS)),
    authority: AuthorityStore = Depends(get_authority),
) -> List[OrganizationMemberResponse]:
    """
    Get all active members of an organization.

    Access is restricted to users with VIEW_MEMBERS capability (every role
    from manager up).
    """
    service = OrganizationService(authority)
    return await service.get_organization_members(org_id)


@router.patch(
    "/{org_id}/members/{member_id}",
    response_model=OrganizationMemberResponse,
    operation_id="updateOrganizationMember",
)
async def update_organization_member(
    org_id: str,
    member_id: str,
    updates: UpdateOrganizationMemberRequest,
    decision: AccessDecision = Depends(require_capability(Capability.MANAGE_USERS)),
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> OrganizationMemberResponse:
    """
    Update an organization member.

    Supports soft removal (`status: "removed"`) and role changes. Access is
    restricted to users with MANAGE_USERS capability.

    Business rules:
    - Cannot remove yourself or change your own role
    - Cannot remove or demote the last super admin
    - Only super admins may manage roles at or above their own rank
    - Can only update active members
    """
    service = OrganizationService(authority)
    return await service.update_organization_member(
        org_id, member_id, updates, user_id, decision.role
    )
