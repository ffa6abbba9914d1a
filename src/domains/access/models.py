# src/domains/access/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict

from src.shared.roles import OrganizationRole


class AccessDecision(BaseModel):
    """
    A user's effective access to an organization.

    Read-only snapshot; `verified` is False when the role was assumed because
    the authority could not be consulted.
    """

    model_config = ConfigDict(frozen=True)

    can_access: bool
    role: Optional[OrganizationRole]
    reason: str
    verified: bool = True


class PermissionCheckResponse(BaseModel):
    allowed: bool
    role: Optional[OrganizationRole]
    verified: bool
