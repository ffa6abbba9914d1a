# src/domains/invitations/routes.py
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from src.core.authority import AuthorityStore, InvitationStatus, get_authority
from src.domains.access.models import AccessDecision
from src.domains.auth.dependencies import get_current_user_id
from src.domains.invitations.models import (
    InvitationCreate,
    InvitationReply,
    InvitationResponse,
)
from src.domains.invitations.service import InvitationLifecycle
from src.shared.permissions import Capability, require_capability

router = APIRouter(tags=["Invitations"])


def _respond(
    lifecycle: InvitationLifecycle, invitations: list
) -> List[InvitationResponse]:
    return [
        InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))
        for invitation in invitations
    ]


@router.post(
    "/organizations/{org_id}/invitations",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createInvitation",
)
async def create_invitation(
    org_id: str,
    request: InvitationCreate,
    decision: AccessDecision = Depends(require_capability(Capability.MANAGE_USERS)),
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> InvitationResponse:
    """
    Invite a user to the organization.

    Access is restricted to users with MANAGE_USERS capability (super admins
    and admins). Inviting a user who already has a pending invitation for the
    same role resends that invitation with its original message; a different
    role is rejected until the pending invitation is cancelled.
    """
    lifecycle = InvitationLifecycle(authority)
    invitation = await lifecycle.create(
        org_id, user_id, request.invitee, request.role, request.message
    )
    return InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))


@router.get(
    "/organizations/{org_id}/invitations",
    response_model=List[InvitationResponse],
    operation_id="getOrganizationInvitations",
)
async def get_organization_invitations(
    org_id: str,
    invitation_status: Optional[InvitationStatus] = None,
    decision: AccessDecision = Depends(require_capability(Capability.VIEW_MEMBERS)),
    authority: AuthorityStore = Depends(get_authority),
) -> List[InvitationResponse]:
    """Get invitations sent by the organization, optionally filtered by status."""
    lifecycle = InvitationLifecycle(authority)
    invitations = await lifecycle.list_for_organization(org_id, invitation_status)
    return _respond(lifecycle, invitations)


@router.get(
    "/invitations/pending",
    response_model=List[InvitationResponse],
    operation_id="getPendingInvitations",
)
async def get_pending_invitations(
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> List[InvitationResponse]:
    """Get the calling user's pending, unexpired invitations."""
    lifecycle = InvitationLifecycle(authority)
    invitations = await lifecycle.list_pending_for_user(user_id)
    return _respond(lifecycle, invitations)


@router.get(
    "/invitations/{invitation_id}",
    response_model=InvitationResponse,
    operation_id="getInvitation",
)
async def get_invitation(
    invitation_id: str,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> InvitationResponse:
    lifecycle = InvitationLifecycle(authority)
    invitation = await lifecycle.get(invitation_id, actor_id=user_id)
    return InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))


@router.post(
    "/invitations/{invitation_id}/accept",
    response_model=InvitationResponse,
    operation_id="acceptInvitation",
)
async def accept_invitation(
    invitation_id: str,
    reply: InvitationReply,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> InvitationResponse:
    """Accept an invitation addressed to the calling user and join the organization."""
    lifecycle = InvitationLifecycle(authority)
    invitation = await lifecycle.accept(invitation_id, reply.message, actor_id=user_id)
    return InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))


@router.post(
    "/invitations/{invitation_id}/decline",
    response_model=InvitationResponse,
    operation_id="declineInvitation",
)
async def decline_invitation(
    invitation_id: str,
    reply: InvitationReply,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> InvitationResponse:
    lifecycle = InvitationLifecycle(authority)
    invitation = await lifecycle.decline(
        invitation_id, reply.message, actor_id=user_id
    )
    return InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))


@router.post(
    "/invitations/{invitation_id}/cancel",
    response_model=InvitationResponse,
    operation_id="cancelInvitation",
)
async def cancel_invitation(
    invitation_id: str,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> InvitationResponse:
    """Withdraw a pending invitation. Only the inviter may cancel."""
    lifecycle = InvitationLifecycle(authority)
    invitation = await lifecycle.cancel(invitation_id, actor_id=user_id)
    return InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))


@router.post(
    "/invitations/{invitation_id}/resend",
    response_model=InvitationResponse,
    operation_id="resendInvitation",
)
async def resend_invitation(
    invitation_id: str,
    user_id: str = Depends(get_current_user_id),
    authority: AuthorityStore = Depends(get_authority),
) -> InvitationResponse:
    """
    Resend a pending, expired or declined invitation.

    The expiry clock restarts from now. Cancelled invitations cannot be
    resent; create a new invitation instead.
    """
    lifecycle = InvitationLifecycle(authority)
    invitation = await lifecycle.resend(invitation_id, actor_id=user_id)
    return InvitationResponse.from_record(invitation, lifecycle.expires_at(invitation))
