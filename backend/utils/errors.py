# backend/utils/errors.py
from fastapi import HTTPException, status

# Domain errors raised by routes and helpers.
# Each one maps to a fixed HTTP status; the message is overridable.


class AuthenticationFailure(HTTPException):
    def __init__(self, detail: str = "Not authorized, token missing or token is invalid"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class CredentialExpired(HTTPException):
    def __init__(self, detail: str = "Token expired. Please log in again."):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class CredentialInvalid(HTTPException):
    def __init__(self, detail: str = "Invalid token. Please log in again."):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AuthorizationDenied(HTTPException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationFailure(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Conflict(HTTPException):
    def __init__(self, detail: str = "User already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ImageHostError(Exception):
    """Upload or deletion on the image hosting service failed."""
