import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from src.shared.exceptions import (
    DuplicateInvitationFault,
    NotFoundFault,
    TransportFault,
)
from src.shared.roles import OrganizationRole

from .base import AuthorityStore
from .models import (
    Invitation,
    InvitationFilter,
    InvitationStatus,
    OrganizationMembership,
)

logger = logging.getLogger(__name__)


def _segment(value: str) -> str:
    # Invitee IDs may be emails; reserved characters stay inside the segment
    return quote(value, safe="")


def _member_path(org_id: str, user_id: str) -> str:
    return f"/organizations/{_segment(org_id)}/members/{_segment(user_id)}"


class HttpAuthority(AuthorityStore):
    """Authority client for a remote REST membership service."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def get_membership(
        self, org_id: str, user_id: str
    ) -> Optional[OrganizationMembership]:
        try:
            data = await self._request("GET", _member_path(org_id, user_id))
        except NotFoundFault:
            return None
        return OrganizationMembership.model_validate(data)

    async def upsert_membership(
        self, org_id: str, user_id: str, role: OrganizationRole
    ) -> OrganizationMembership:
        data = await self._request(
            "PUT",
            _member_path(org_id, user_id),
            json={"role": role.value},
        )
        return OrganizationMembership.model_validate(data)

    async def deactivate_membership(
        self, org_id: str, user_id: str
    ) -> OrganizationMembership:
        data = await self._request(
            "POST", f"{_member_path(org_id, user_id)}/deactivate"
        )
        return OrganizationMembership.model_validate(data)

    async def list_memberships(
        self, org_id: str, include_inactive: bool = False
    ) -> List[OrganizationMembership]:
        data = await self._request(
            "GET",
            f"/organizations/{_segment(org_id)}/members",
            params={"include_inactive": str(include_inactive).lower()},
        )
        return [OrganizationMembership.model_validate(item) for item in data]

    async def create_invitation(self, invitation: Invitation) -> Invitation:
        data = await self._request(
            "POST", "/invitations", json=invitation.model_dump(mode="json")
        )
        return Invitation.model_validate(data)

    async def get_invitation(self, invitation_id: str) -> Invitation:
        data = await self._request("GET", f"/invitations/{_segment(invitation_id)}")
        return Invitation.model_validate(data)

    async def update_invitation_status(
        self,
        invitation_id: str,
        status: InvitationStatus,
        message: Optional[str] = None,
    ) -> Invitation:
        payload: Dict[str, Any] = {"status": status.value}
        if message is not None:
            payload["response_message"] = message
        data = await self._request(
            "PATCH", f"/invitations/{_segment(invitation_id)}", json=payload
        )
        return Invitation.model_validate(data)

    async def reissue_invitation(
        self, invitation_id: str, created_at: datetime
    ) -> Invitation:
        data = await self._request(
            "POST",
            f"/invitations/{_segment(invitation_id)}/reissue",
            json={"created_at": created_at.isoformat()},
        )
        return Invitation.model_validate(data)

    async def list_invitations(self, filters: InvitationFilter) -> List[Invitation]:
        params: Dict[str, Any] = {}
        if filters.organization_id:
            params["organization_id"] = filters.organization_id
        if filters.invitee_id:
            params["invitee_id"] = filters.invitee_id
        if filters.inviter_id:
            params["inviter_id"] = filters.inviter_id
        if filters.statuses is not None:
            params["status"] = [s.value for s in filters.statuses]

        data = await self._request("GET", "/invitations", params=params)
        return [Invitation.model_validate(item) for item in data]

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a request to the authority and map failures onto faults.

        Raises:
            NotFoundFault: On 404
            DuplicateInvitationFault: On 409
            TransportFault: On any other error status or a request error
        """
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    method, path, headers=headers, json=json, params=params
                )
                response.raise_for_status()
                return response.json()

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code == 404:
                raise NotFoundFault(f"Authority record not found: {path}")
            if status_code == 409:
                raise DuplicateInvitationFault()
            logger.warning(f"Authority {method} {path} failed with {status_code}")
            raise TransportFault(
                f"Authority request failed with status {status_code}"
            )

        except httpx.RequestError as e:
            logger.warning(f"Authority {method} {path} unreachable: {e}")
            raise TransportFault(f"Authority request error: {str(e)}")

        except ValueError as e:
            raise TransportFault(f"Authority returned invalid JSON: {str(e)}")
