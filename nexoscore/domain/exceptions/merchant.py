"""Merchant lookup domain exceptions."""

from .base import DomainException


class MerchantNotFoundException(DomainException):
    """Raised when a merchant identifier does not resolve."""

    def __init__(self, identifier: str):
        super().__init__(
            message=f"No merchant registered for identifier: {identifier}",
            code="MERCHANT_NOT_FOUND",
        )
        self.identifier = identifier


class InvalidIdentifierException(DomainException):
    """Raised when a lookup identifier cannot be a phone or national id."""

    def __init__(self, identifier: str):
        super().__init__(
            message=(
                "Invalid identifier. Provide a national id (e.g. 4523871) "
                "or a phone number (e.g. +595981234567)"
            ),
            code="INVALID_IDENTIFIER",
        )
        self.identifier = identifier
