# src/shared/exceptions.py
from typing import Optional

from fastapi import HTTPException, status


class AccessControlFault(HTTPException):
    """Base class for every fault raised by the access-control core."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Access control failure"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or type(self).message
        super().__init__(status_code=type(self).status_code, detail=self.message)


# Caller misuse
class ValidationFault(AccessControlFault):
    """Malformed role, missing required field or conflicting record."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request data"


class DuplicateInvitationFault(ValidationFault):
    """A pending invitation already exists for the organization and invitee."""

    status_code = status.HTTP_409_CONFLICT
    message = "User already has a pending invitation"


class InvalidTransitionFault(AccessControlFault):
    """Lifecycle call attempted from an incompatible invitation state."""

    status_code = status.HTTP_409_CONFLICT
    message = "Invitation is not in a valid state for this operation"


# Authorization
class AuthorizationFault(AccessControlFault):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Not authorized"


# Authority / store
class NotFoundFault(AccessControlFault):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Record not found"


class TransportFault(AccessControlFault):
    """The membership authority is unreachable or returned an error."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Membership authority unavailable"


# Configuration
class ConfigurationFault(AccessControlFault):
    """A permission record carries a level outside the closed set."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Invalid permission configuration"
