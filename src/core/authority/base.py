from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.shared.roles import OrganizationRole

from .models import (
    Invitation,
    InvitationFilter,
    InvitationStatus,
    OrganizationMembership,
)


class AuthorityStore(ABC):
    """
    Source of truth for organization memberships and invitations.

    Every operation is a single round trip and may raise TransportFault.
    Records returned are snapshots; callers must not cache them across calls.
    """

    @abstractmethod
    async def get_membership(
        self, org_id: str, user_id: str
    ) -> Optional[OrganizationMembership]:
        """
        Get the membership record for a user in an organization.

        Returns:
            The membership (active or not), or None if the user never joined
        """
        pass

    @abstractmethod
    async def upsert_membership(
        self, org_id: str, user_id: str, role: OrganizationRole
    ) -> OrganizationMembership:
        """Create the membership, or reactivate it and set its role."""
        pass

    @abstractmethod
    async def deactivate_membership(
        self, org_id: str, user_id: str
    ) -> OrganizationMembership:
        """
        Mark a membership inactive. The record is retained.

        Raises:
            NotFoundFault: If the user has no membership in the organization
        """
        pass

    @abstractmethod
    async def list_memberships(
        self, org_id: str, include_inactive: bool = False
    ) -> List[OrganizationMembership]:
        """List memberships of an organization in joined order."""
        pass

    @abstractmethod
    async def create_invitation(self, invitation: Invitation) -> Invitation:
        """
        Persist a new invitation.

        Raises:
            DuplicateInvitationFault: If a pending invitation already exists
                for the same organization and invitee
        """
        pass

    @abstractmethod
    async def get_invitation(self, invitation_id: str) -> Invitation:
        """
        Raises:
            NotFoundFault: If the invitation does not exist
        """
        pass

    @abstractmethod
    async def update_invitation_status(
        self,
        invitation_id: str,
        status: InvitationStatus,
        message: Optional[str] = None,
    ) -> Invitation:
        """Set the status and, when given, the response message."""
        pass

    @abstractmethod
    async def reissue_invitation(
        self, invitation_id: str, created_at: datetime
    ) -> Invitation:
        """Return an invitation to pending with a new creation time and no response."""
        pass

    @abstractmethod
    async def list_invitations(self, filters: InvitationFilter) -> List[Invitation]:
        pass
