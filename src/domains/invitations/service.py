# src/domains/invitations/service.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, FrozenSet, List, Optional
from uuid import uuid4

from src.core.authority import (
    AuthorityStore,
    Invitation,
    InvitationFilter,
    InvitationStatus,
    OrganizationMembership,
)
from src.core.settings import settings
from src.domains.access.service import AccessResolver
from src.shared.exceptions import (
    AccessControlFault,
    AuthorizationFault,
    InvalidTransitionFault,
    ValidationFault,
)
from src.shared.permissions import Capability, has_capability
from src.shared.roles import OrganizationRole, parse_role

logger = logging.getLogger(__name__)

PENDING = InvitationStatus.pending

# Statuses each operation may start from
ALLOWED_FROM: Dict[str, FrozenSet[InvitationStatus]] = {
    "accept": frozenset({PENDING}),
    "decline": frozenset({PENDING}),
    "cancel": frozenset({PENDING}),
    "resend": frozenset(
        {PENDING, InvitationStatus.expired, InvitationStatus.declined}
    ),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvitationLifecycle:
    """
    State machine for organization invitations.

    pending -> accepted | declined | cancelled | expired
    expired | declined -> pending (resend)

    Every mutation is a call to the authority; nothing is cached between calls.
    """

    def __init__(
        self,
        authority: AuthorityStore,
        resolver: Optional[AccessResolver] = None,
        clock: Callable[[], datetime] = utcnow,
        expiry_days: Optional[int] = None,
    ):
        self.authority = authority
        self.resolver = resolver or AccessResolver(authority)
        self.clock = clock
        self.expiry = timedelta(
            days=(
                expiry_days
                if expiry_days is not None
                else settings.INVITATION_EXPIRY_DAYS
            )
        )

    def expires_at(self, invitation: Invitation) -> Optional[datetime]:
        """Expiry time of a pending invitation; None once it has left pending."""
        if invitation.status != PENDING:
            return None
        return invitation.created_at + self.expiry

    def is_stale(self, invitation: Invitation) -> bool:
        expires_at = self.expires_at(invitation)
        return expires_at is not None and self.clock() >= expires_at

    async def create(
        self,
        organization_id: str,
        inviter_id: str,
        invitee: str,
        role: OrganizationRole | str,
        message: Optional[str] = None,
    ) -> Invitation:
        """
        Invite a user to an organization.

        If a pending invitation already exists for the organization and
        invitee with the same role, it is resent instead of duplicated and
        keeps its original message. A different role is rejected; cancel the
        pending invitation first.

        Args:
            organization_id: Organization to invite into
            inviter_id: User sending the invitation
            invitee: User ID or email of the invitee
            role: Proposed role
            message: Optional note shown to the invitee

        Returns:
            The pending invitation

        Raises:
            ValidationFault: Missing fields, unknown role, self-invite, the
                invitee is already an active member, or a pending invitation
                offers a different role
            DuplicateInvitationFault: A concurrent create won the race at the store
            TransportFault: The authority could not be consulted
        """
        if not organization_id or not inviter_id:
            raise ValidationFault("Organization and inviter are required")
        invitee_id = (invitee or "").strip()
        if not invitee_id:
            raise ValidationFault("Invitee is required")
        proposed_role = parse_role(role)

        if invitee_id == inviter_id:
            raise ValidationFault("Cannot invite yourself")

        await self._ensure_not_member(organization_id, invitee_id)

        existing = await self.authority.list_invitations(
            InvitationFilter(
                organization_id=organization_id,
                invitee_id=invitee_id,
                statuses=[PENDING],
            )
        )
        if existing:
            if existing[0].role != proposed_role:
                raise ValidationFault(
                    "A pending invitation already offers the "
                    f"{existing[0].role.value} role; cancel it to change the role"
                )
            logger.info(
                f"Pending invitation {existing[0].id} already exists for "
                f"{invitee_id} in organization {organization_id}; resending"
            )
            return await self._reissue(existing[0])

        invitation = Invitation(
            id=str(uuid4()),
            organization_id=organization_id,
            inviter_id=inviter_id,
            invitee_id=invitee_id,
            invitee_email=invitee_id if "@" in invitee_id else None,
            role=proposed_role,
            status=PENDING,
            created_at=self.clock(),
            message=message,
        )
        created = await self.authority.create_invitation(invitation)
        logger.info(
            f"Invitation {created.id} created: {inviter_id} invited {invitee_id} "
            f"to organization {organization_id} as {proposed_role.value}"
        )
        return created

    async def accept(
        self,
        invitation_id: str,
        message: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Invitation:
        """
        Accept a pending invitation and grant membership with its role.

        The membership is written before the status. If the status write
        fails, a membership created or reactivated here is deactivated again
        and the original fault is raised.

        Raises:
            AuthorizationFault: The actor is not the invitee
            InvalidTransitionFault: The invitation is not pending or has expired
            ValidationFault: The invitee is already an active member
        """
        invitation = await self.authority.get_invitation(invitation_id)
        self._ensure_actor(actor_id, invitation.invitee_id, "accept")
        await self._ensure_transition(invitation, "accept")

        previous = await self.authority.get_membership(
            invitation.organization_id, invitation.invitee_id
        )
        if previous is not None and previous.is_active:
            raise ValidationFault("User is already a member of this organization")

        await self.authority.upsert_membership(
            invitation.organization_id, invitation.invitee_id, invitation.role
        )

        try:
            accepted = await self.authority.update_invitation_status(
                invitation_id, InvitationStatus.accepted, message
            )
        except AccessControlFault as e:
            logger.error(
                f"Failed to mark invitation {invitation_id} accepted, "
                f"rolling back membership: {e.message}"
            )
            await self._rollback_membership(invitation, previous)
            raise

        logger.info(
            f"Invitation {invitation_id} accepted: {invitation.invitee_id} joined "
            f"organization {invitation.organization_id} as {invitation.role.value}"
        )
        return accepted

    async def decline(
        self,
        invitation_id: str,
        message: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> Invitation:
        invitation = await self.authority.get_invitation(invitation_id)
        self._ensure_actor(actor_id, invitation.invitee_id, "decline")
        await self._ensure_transition(invitation, "decline")

        declined = await self.authority.update_invitation_status(
            invitation_id, InvitationStatus.declined, message
        )
        logger.info(f"Invitation {invitation_id} declined by {invitation.invitee_id}")
        return declined

    async def cancel(
        self, invitation_id: str, actor_id: Optional[str] = None
    ) -> Invitation:
        """Withdraw a pending invitation. Only the inviter may cancel."""
        invitation = await self.authority.get_invitation(invitation_id)
        self._ensure_actor(actor_id, invitation.inviter_id, "cancel")
        await self._ensure_transition(invitation, "cancel")

        cancelled = await self.authority.update_invitation_status(
            invitation_id, InvitationStatus.cancelled
        )
        logger.info(f"Invitation {invitation_id} cancelled by {invitation.inviter_id}")
        return cancelled

    async def resend(
        self, invitation_id: str, actor_id: Optional[str] = None
    ) -> Invitation:
        """
        Re-offer a pending, expired or declined invitation.

        The creation time (and with it the expiry clock) is reset and any
        response message cleared. Cancelled invitations need a fresh create.

        Raises:
            AuthorizationFault: The actor is neither the inviter nor allowed
                to manage users in the organization
            InvalidTransitionFault: The invitation is accepted or cancelled
            ValidationFault: The invitee has since become an active member
        """
        invitation = await self.authority.get_invitation(invitation_id)
        if actor_id is not None and actor_id != invitation.inviter_id:
            await self._ensure_can_manage(invitation.organization_id, actor_id)
        self._ensure_status(invitation, "resend")

        if invitation.status != PENDING:
            await self._ensure_not_member(
                invitation.organization_id, invitation.invitee_id
            )

        return await self._reissue(invitation)

    async def get(
        self, invitation_id: str, actor_id: Optional[str] = None
    ) -> Invitation:
        """
        Fetch an invitation. When an actor is given it must be the inviter, the
        invitee, or a member allowed to view the organization's members.
        """
        invitation = await self.authority.get_invitation(invitation_id)
        if actor_id is not None and actor_id not in (
            invitation.inviter_id,
            invitation.invitee_id,
        ):
            decision = await self.resolver.lookup(invitation.organization_id, actor_id)
            if not decision.can_access or not has_capability(
                decision.role, Capability.VIEW_MEMBERS
            ):
                raise AuthorizationFault("Not allowed to view this invitation")
        return invitation

    async def list_for_organization(
        self,
        organization_id: str,
        status: Optional[InvitationStatus] = None,
    ) -> List[Invitation]:
        return await self.authority.list_invitations(
            InvitationFilter(
                organization_id=organization_id,
                statuses=[status] if status else None,
            )
        )

    async def list_pending_for_user(self, user_id: str) -> List[Invitation]:
        """Pending invitations addressed to a user that have not yet expired."""
        invitations = await self.authority.list_invitations(
            InvitationFilter(invitee_id=user_id, statuses=[PENDING])
        )
        return [i for i in invitations if not self.is_stale(i)]

    async def expire_stale(
        self, organization_id: Optional[str] = None
    ) -> List[Invitation]:
        """
        Mark every pending invitation past its expiry as expired.

        Returns:
            The invitations that were expired by this call
        """
        pending = await self.authority.list_invitations(
            InvitationFilter(organization_id=organization_id, statuses=[PENDING])
        )
        expired = []
        for invitation in pending:
            if self.is_stale(invitation):
                expired.append(
                    await self.authority.update_invitation_status(
                        invitation.id, InvitationStatus.expired
                    )
                )

        if expired:
            logger.info(f"Expired {len(expired)} stale invitation(s)")
        return expired

    async def _reissue(self, invitation: Invitation) -> Invitation:
        reissued = await self.authority.reissue_invitation(invitation.id, self.clock())
        logger.info(
            f"Invitation {invitation.id} resent (was {invitation.status.value})"
        )
        return reissued

    async def _ensure_not_member(self, organization_id: str, user_id: str) -> None:
        decision = await self.resolver.lookup(organization_id, user_id)
        if decision.can_access:
            raise ValidationFault("User is already a member of this organization")

    async def _ensure_can_manage(self, organization_id: str, actor_id: str) -> None:
        decision = await self.resolver.lookup(organization_id, actor_id)
        if not decision.can_access or not has_capability(
            decision.role, Capability.MANAGE_USERS
        ):
            raise AuthorizationFault(
                "Only the inviter or an organization administrator may resend"
            )

    def _ensure_actor(
        self, actor_id: Optional[str], expected_id: str, operation: str
    ) -> None:
        if actor_id is not None and actor_id != expected_id:
            raise AuthorizationFault(f"Not allowed to {operation} this invitation")

    def _ensure_status(self, invitation: Invitation, operation: str) -> None:
        if invitation.status not in ALLOWED_FROM[operation]:
            raise InvalidTransitionFault(
                f"Cannot {operation} an invitation that is {invitation.status.value}"
            )

    async def _ensure_transition(self, invitation: Invitation, operation: str) -> None:
        """Check the status allows `operation`, expiring a stale pending invitation."""
        self._ensure_status(invitation, operation)

        if self.is_stale(invitation):
            await self.authority.update_invitation_status(
                invitation.id, InvitationStatus.expired
            )
            logger.info(f"Invitation {invitation.id} expired")
            raise InvalidTransitionFault("Invitation has expired")

    async def _rollback_membership(
        self,
        invitation: Invitation,
        previous: Optional[OrganizationMembership],
    ) -> None:
        org_id = invitation.organization_id
        user_id = invitation.invitee_id
        try:
            if previous is not None:
                await self.authority.upsert_membership(org_id, user_id, previous.role)
            await self.authority.deactivate_membership(org_id, user_id)
        except AccessControlFault as e:
            logger.error(
                f"Membership rollback for {user_id} in organization {org_id} "
                f"failed: {e.message}"
            )
