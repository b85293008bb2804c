from fastapi import status


class UserManagementError(Exception):
    """Base class for the typed outcomes raised by the identity and user services."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(UserManagementError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found"


class ForbiddenError(UserManagementError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class BadRequestError(UserManagementError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(UserManagementError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class EmailInUse(ConflictError):
    default_message = "Email already registered"


class InvalidCredentials(UserManagementError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class InvalidToken(UserManagementError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"
