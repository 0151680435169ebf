"""
Application error taxonomy.

Every error a handler can raise is an HTTPException subclass, so FastAPI's
default handler renders it as {"detail": "..."} with the right status code.
Messages for authentication and account-existence failures are kept generic
by the callers; the precise reason goes to the logs only.
"""

from fastapi import HTTPException
from starlette import status


class ValidationError(HTTPException):
    """Malformed or inconsistent input detected before any write."""

    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AuthenticationError(HTTPException):
    """Missing, invalid, expired or revoked session."""

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class AuthorizationError(HTTPException):
    """Authenticated, but not an admin or not the owner of the resource."""

    def __init__(self, detail: str = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """Duplicate unique keys, or an edit the entity's current state forbids."""

    def __init__(self, detail: str = "Request conflicts with the current state"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ConcurrentUpdateError(HTTPException):
    """Another request committed a newer version of the row first."""

    def __init__(self, detail: str = "Resource was modified by another request. Please retry."):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ExpiredError(HTTPException):
    """A verification code or reset token past its expiry."""

    def __init__(self, detail: str = "Expired"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class TransientDependencyError(Exception):
    """
    An outbound dependency (SMTP) failed.

    Never reaches a client: the email service catches it, logs it and
    reports failure as a boolean.
    """
