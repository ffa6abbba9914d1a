from typing import Awaitable, Callable

from fastapi import Depends

from src.core.authority import AuthorityStore, get_authority
from src.domains.access.models import AccessDecision
from src.domains.access.service import AccessResolver
from src.domains.auth.dependencies import get_current_user_id
from src.shared.exceptions import AuthorizationFault

from .models import Capability
from .services import has_capability


def require_capability(
    capability: Capability,
) -> Callable[..., Awaitable[AccessDecision]]:
    """
    Dependency factory for role-based authorization.

    Creates a dependency that validates the current user holds the specified
    capability in the organization.

    Args:
        capability: The capability required to access the endpoint

    Returns:
        Async dependency function that validates the capability and returns
        the caller's access decision
    """

    async def check_capability(
        org_id: str,
        user_id: str = Depends(get_current_user_id),
        authority: AuthorityStore = Depends(get_authority),
    ) -> AccessDecision:
        """
        Validate user holds the required capability for the organization.

        Gating uses a verified lookup: an assumed decision never unlocks a
        capability, so authority failures surface as TransportFault.

        Raises:
            AuthorizationFault: If user is not an active member or lacks the capability
        """
        decision = await AccessResolver(authority).lookup(org_id, user_id)

        if not decision.can_access:
            raise AuthorizationFault("Access denied to organization")

        if not has_capability(decision.role, capability):
            raise AuthorizationFault(
                f"Insufficient permissions: {capability.value} required"
            )

        return decision

    return check_capability
