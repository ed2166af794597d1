"""Error taxonomy shared by services and the HTTP layer.

Every error carries a human-readable message and the HTTP status it maps to.
The API renders them as ``{"message": ..., "status": ...}``.
"""

from fastapi import status


class ResponseError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(ResponseError):
    """Malformed, missing or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidFormatError(BadRequestError):
    """Race time text is not HH:MM:SS."""


class UnauthorizedError(ResponseError):
    """Missing, invalid or expired token, or insufficient role."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ResponseError):
    """Referenced runner or result does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(ResponseError):
    """Underlying store failure, including corrupt cached best times."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
