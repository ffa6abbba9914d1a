# src/domains/organizations/service.py
import logging
from typing import List
from uuid import uuid4

from src.core.authority import AuthorityStore, OrganizationMembership
from src.domains.organizations.models import (
    CreateOrganizationResponse,
    OrganizationCreate,
    OrganizationMemberResponse,
    UpdateOrganizationMemberRequest,
)
from src.shared.exceptions import AuthorizationFault, NotFoundFault, ValidationFault
from src.shared.roles import (
    SUPER_PRIVILEGED_ROLE,
    OrganizationRole,
    can_manage_role,
    describe,
    parse_role,
)

logger = logging.getLogger(__name__)


class OrganizationService:
    def __init__(self, authority: AuthorityStore):
        self.authority = authority

    async def create_organization(
        self, organization_data: OrganizationCreate, creator_id: str
    ) -> CreateOrganizationResponse:
        """
        Create a new organization and add the creator as its super admin.

        The organization record itself belongs to the storage layer; this
        allocates the identifier and creates the founding membership.
        """
        organization_id = str(uuid4())

        membership = await self.authority.upsert_membership(
            organization_id, creator_id, SUPER_PRIVILEGED_ROLE
        )
        logger.info(f"Organization {organization_id} created by {creator_id}")

        return CreateOrganizationResponse(
            organization_id=organization_id,
            name=organization_data.name,
            role=membership.role,
        )

    async def get_organization_members(
        self, organization_id: str
    ) -> List[OrganizationMemberResponse]:
        """
        Get all active members of an organization.

        Args:
            organization_id: The organization ID to get members for

        Returns:
            List of organization members in joined order
        """
        members = await self.authority.list_memberships(organization_id)
        return [OrganizationMemberResponse.from_record(member) for member in members]

    async def update_organization_member(
        self,
        organization_id: str,
        member_id: str,
        updates: UpdateOrganizationMemberRequest,
        requester_id: str,
        requester_role: OrganizationRole,
    ) -> OrganizationMemberResponse:
        """
        Update an organization member (soft removal or role change).

        Args:
            organization_id: The organization ID
            member_id: The user ID of the member to update
            updates: The updates to apply
            requester_id: The user making the change
            requester_role: The requesting user's role in the organization

        Returns:
            Updated organization member details

        Raises:
            NotFoundFault: If the member is not found
            ValidationFault: If a business rule is violated
            AuthorizationFault: If the requester cannot manage the member's role
        """
        member = await self.authority.get_membership(organization_id, member_id)
        if not member:
            raise NotFoundFault("Member not found")

        if updates.status == "removed":
            await self._validate_member_removal(
                member, requester_id, requester_role, organization_id
            )
            updated = await self.authority.deactivate_membership(
                organization_id, member_id
            )
            logger.info(
                f"Member {member_id} removed from organization {organization_id} "
                f"by {requester_id}"
            )
            return OrganizationMemberResponse.from_record(updated)

        new_role = parse_role(updates.role)
        await self._validate_role_change(
            member, new_role, requester_id, requester_role, organization_id
        )
        updated = await self.authority.upsert_membership(
            organization_id, member_id, new_role
        )
        logger.info(
            f"Member {member_id} in organization {organization_id} changed from "
            f"{member.role.value} to {new_role.value} by {requester_id}"
        )
        return OrganizationMemberResponse.from_record(updated)

    async def _validate_member_removal(
        self,
        member: OrganizationMembership,
        requester_id: str,
        requester_role: OrganizationRole,
        organization_id: str,
    ) -> None:
        # Cannot remove yourself
        if member.user_id == requester_id:
            raise ValidationFault("Cannot remove yourself from the organization")

        # Member must be active to be removed
        if not member.is_active:
            raise ValidationFault("Member is not active")

        self._ensure_outranks(requester_role, member.role)

        # Cannot remove last super admin
        if member.role == SUPER_PRIVILEGED_ROLE:
            await self._ensure_other_super_admin(organization_id)

    async def _validate_role_change(
        self,
        member: OrganizationMembership,
        new_role: OrganizationRole,
        requester_id: str,
        requester_role: OrganizationRole,
        organization_id: str,
    ) -> None:
        if not member.is_active:
            raise ValidationFault("Member is not active")

        if member.user_id == requester_id:
            raise ValidationFault("Cannot change your own role")

        self._ensure_outranks(requester_role, member.role)
        self._ensure_outranks(requester_role, new_role)

        # Cannot demote last super admin
        if member.role == SUPER_PRIVILEGED_ROLE and new_role != SUPER_PRIVILEGED_ROLE:
            await self._ensure_other_super_admin(organization_id)

    def _ensure_outranks(
        self, requester_role: OrganizationRole, role: OrganizationRole
    ) -> None:
        if describe(requester_role).can_manage_all:
            return
        if not can_manage_role(requester_role, role):
            raise AuthorizationFault(
                f"A {requester_role.value} cannot manage the {role.value} role"
            )

    async def _ensure_other_super_admin(self, organization_id: str) -> None:
        members = await self.authority.list_memberships(organization_id)
        super_admins = [m for m in members if m.role == SUPER_PRIVILEGED_ROLE]
        if len(super_admins) <= 1:
            raise ValidationFault("Cannot remove the last super admin")
