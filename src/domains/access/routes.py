# src/domains/access/routes.py
from fastapi import APIRouter, Depends

from src.core.authority import AuthorityStore, get_authority
from src.domains.access.models import AccessDecision, PermissionCheckResponse
from src.domains.access.service import AccessResolver
from src.domains.auth.dependencies import get_current_user_id
from src.shared.permissions import evaluate
from src.shared.permissions.models import PermissionCheckRequest

router = APIRouter(prefix="/organizations", tags=["Access"])


@router.get(
    "/{org_id}/access/{user_id}",
    response_model=AccessDecision,
    operation_id="getOrganizationAccess",
)
async def get_organization_access(
    org_id: str,
    user_id: str,
    authority: AuthorityStore = Depends(get_authority),
) -> AccessDecision:
    """
    Get a user's effective access to an organization.

    When the authority is unreachable the decision is assumed (member role,
    `verified` false) rather than failing the request.
    """
    resolver = AccessResolver(authority)
    return await resolver.resolve(org_id, user_id)


@router.post(
    "/{org_id}/access/evaluate",
    response_model=PermissionCheckResponse,
    operation_id="evaluatePermission",
)
async def evaluate_permission(
    org_id: str,
    check: PermissionCheckRequest,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> PermissionCheckResponse:
    """
    Evaluate a permission record for the calling user.

    The caller's role is their effective role in the organization. Users
    without access to the organization are always denied.
    """
    decision = await AccessResolver(authority).resolve(org_id, user_id)
    role = decision.role if decision.can_access else None
    allowed = decision.can_access and evaluate(
        user_id, check.entity, check.action, check.permission, role
    )
    return PermissionCheckResponse(
        allowed=allowed, role=role, verified=decision.verified
    )
