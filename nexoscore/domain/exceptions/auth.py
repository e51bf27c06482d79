"""API access domain exceptions."""

from .base import DomainException


class UnauthorizedException(DomainException):
    """Raised when the API key is missing or invalid."""

    def __init__(self):
        super().__init__(
            message="Missing or invalid API key. Include the X-API-Key header.",
            code="UNAUTHORIZED",
        )
