# src/domains/access/service.py
import logging
from typing import Optional

from src.core.authority import AuthorityStore
from src.shared.exceptions import TransportFault
from src.shared.roles import OrganizationRole

from .models import AccessDecision

logger = logging.getLogger(__name__)

# Role reported when access is assumed rather than verified
FALLBACK_ROLE = OrganizationRole.member

MEMBER_REASON = "User is a member of the organization"
INACTIVE_REASON = "User's membership in the organization is inactive"
NOT_MEMBER_REASON = "User is not a member of the organization"
ASSUMED_REASON = "Access assumed from organization list (authority unavailable)"


class AccessResolver:
    """Determines a user's effective role in an organization."""

    def __init__(self, authority: AuthorityStore):
        self.authority = authority

    async def lookup(self, organization_id: str, user_id: str) -> AccessDecision:
        """
        Resolve access from the authority without any fallback.

        Raises:
            TransportFault: If the authority cannot be consulted
        """
        membership = await self.authority.get_membership(organization_id, user_id)

        if membership is None:
            return AccessDecision(can_access=False, role=None, reason=NOT_MEMBER_REASON)

        if not membership.is_active:
            return AccessDecision(can_access=False, role=None, reason=INACTIVE_REASON)

        return AccessDecision(
            can_access=True, role=membership.role, reason=MEMBER_REASON
        )

    async def resolve(self, organization_id: str, user_id: str) -> AccessDecision:
        """
        Resolve access, degrading to least-privilege membership on transport failure.

        The caller only asks about organizations already listed for the user,
        so an unreachable authority yields an assumed `member` decision instead
        of blocking the caller. No other fault is absorbed.
        """
        try:
            return await self.lookup(organization_id, user_id)
        except TransportFault as e:
            logger.warning(
                f"Assuming {FALLBACK_ROLE.value} access for user {user_id} "
                f"in organization {organization_id}: {e.message}"
            )
            return AccessDecision(
                can_access=True,
                role=FALLBACK_ROLE,
                reason=ASSUMED_REASON,
                verified=False,
            )

    async def can_access(self, organization_id: str, user_id: str) -> bool:
        decision = await self.resolve(organization_id, user_id)
        return decision.can_access

    async def role_of(
        self, organization_id: str, user_id: str
    ) -> Optional[OrganizationRole]:
        decision = await self.resolve(organization_id, user_id)
        return decision.role
