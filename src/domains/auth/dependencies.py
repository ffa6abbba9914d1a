# src/domains/auth/dependencies.py
from fastapi import Header

from src.shared.exceptions import AccessControlFault


class MissingUserError(AccessControlFault):
    status_code = 401
    message = "Missing user identity"


def get_current_user_id(x_user_id: str = Header(None)) -> str:
    """
    Identify the calling user from the X-User-Id header.

    Credentials are verified upstream; this service only needs the identity.
    """
    if not x_user_id or not x_user_id.strip():
        raise MissingUserError()
    return x_user_id.strip()
