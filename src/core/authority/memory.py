from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from src.shared.exceptions import DuplicateInvitationFault, NotFoundFault
from src.shared.roles import OrganizationRole

from .base import AuthorityStore
from .models import (
    Invitation,
    InvitationFilter,
    InvitationStatus,
    OrganizationMembership,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryAuthority(AuthorityStore):
    """
    Process-local authority.

    Each method completes without suspending, so the pending-invitation
    uniqueness check and the write it guards cannot interleave with another
    coroutine.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self._memberships: Dict[Tuple[str, str], OrganizationMembership] = {}
        self._invitations: Dict[str, Invitation] = {}

    async def get_membership(
        self, org_id: str, user_id: str
    ) -> Optional[OrganizationMembership]:
        membership = self._memberships.get((org_id, user_id))
        return membership.model_copy() if membership else None

    async def upsert_membership(
        self, org_id: str, user_id: str, role: OrganizationRole
    ) -> OrganizationMembership:
        existing = self._memberships.get((org_id, user_id))
        if existing:
            membership = existing.model_copy(update={"role": role, "is_active": True})
        else:
            membership = OrganizationMembership(
                user_id=user_id,
                organization_id=org_id,
                role=role,
                joined_at=self.clock(),
                is_active=True,
            )
        self._memberships[(org_id, user_id)] = membership
        return membership.model_copy()

    async def deactivate_membership(
        self, org_id: str, user_id: str
    ) -> OrganizationMembership:
        existing = self._memberships.get((org_id, user_id))
        if not existing:
            raise NotFoundFault("Member not found")
        membership = existing.model_copy(update={"is_active": False})
        self._memberships[(org_id, user_id)] = membership
        return membership.model_copy()

    async def list_memberships(
        self, org_id: str, include_inactive: bool = False
    ) -> List[OrganizationMembership]:
        members = [
            m.model_copy()
            for (member_org_id, _), m in self._memberships.items()
            if member_org_id == org_id and (include_inactive or m.is_active)
        ]
        return sorted(members, key=lambda m: m.joined_at)

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        self._ensure_no_pending(invitation)
        if invitation.id in self._invitations:
            raise DuplicateInvitationFault(f"Invitation {invitation.id} already exists")
        self._invitations[invitation.id] = invitation.model_copy()
        return invitation.model_copy()

    async def get_invitation(self, invitation_id: str) -> Invitation:
        return self._get(invitation_id).model_copy()

    async def update_invitation_status(
        self,
        invitation_id: str,
        status: InvitationStatus,
        message: Optional[str] = None,
    ) -> Invitation:
        update: dict = {"status": status}
        if message is not None:
            update["response_message"] = message
        invitation = self._get(invitation_id).model_copy(update=update)
        self._invitations[invitation_id] = invitation
        return invitation.model_copy()

    async def reissue_invitation(
        self, invitation_id: str, created_at: datetime
    ) -> Invitation:
        current = self._get(invitation_id)
        if current.status != InvitationStatus.pending:
            self._ensure_no_pending(current)
        invitation = current.model_copy(
            update={
                "status": InvitationStatus.pending,
                "created_at": created_at,
                "response_message": None,
            }
        )
        self._invitations[invitation_id] = invitation
        return invitation.model_copy()

    async def list_invitations(self, filters: InvitationFilter) -> List[Invitation]:
        return [
            invitation.model_copy()
            for invitation in self._invitations.values()
            if filters.matches(invitation)
        ]

    def _get(self, invitation_id: str) -> Invitation:
        invitation = self._invitations.get(invitation_id)
        if not invitation:
            raise NotFoundFault("Invitation not found")
        return invitation

    def _ensure_no_pending(self, invitation: Invitation) -> None:
        for existing in self._invitations.values():
            if (
                existing.id != invitation.id
                and existing.organization_id == invitation.organization_id
                and existing.invitee_id == invitation.invitee_id
                and existing.status == InvitationStatus.pending
            ):
                raise DuplicateInvitationFault()
