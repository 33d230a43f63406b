from typing import List, Optional, Union

from fastapi import status


class AppError(Exception):
    """Base for errors that map directly onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: Union[str, List[str]] = "Server Error"):
        super().__init__(message if isinstance(message, str) else "; ".join(message))
        self.message = message


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    """A business rule forbids the requested change."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, messages: Optional[List[str]] = None):
        super().__init__(list(messages or []))


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
