# src/core/authority/__init__.py
from fastapi import Request

from src.core.settings import settings

from .base import AuthorityStore
from .factory import AuthorityBackend, AuthorityFactory
from .models import (
    Invitation,
    InvitationFilter,
    InvitationStatus,
    OrganizationMembership,
)


async def get_authority(request: Request) -> AuthorityStore:
    """
    Authority dependency for FastAPI dependency injection.

    One store per application, kept on `app.state` and built on first use
    when the lifespan has not already created it.
    """
    authority = getattr(request.app.state, "authority", None)
    if authority is None:
        authority = AuthorityFactory(settings).create()
        request.app.state.authority = authority
    return authority


__all__ = [
    "AuthorityBackend",
    "AuthorityFactory",
    "AuthorityStore",
    "Invitation",
    "InvitationFilter",
    "InvitationStatus",
    "OrganizationMembership",
    "get_authority",
]
