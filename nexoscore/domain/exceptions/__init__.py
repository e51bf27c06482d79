"""Domain Exceptions - Business rule violations and domain errors."""

from .auth import UnauthorizedException
from .base import DomainException
from .batch import BatchAlreadyRunningException
from .merchant import InvalidIdentifierException, MerchantNotFoundException

__all__ = [
    "DomainException",
    "MerchantNotFoundException",
    "InvalidIdentifierException",
    "BatchAlreadyRunningException",
    "UnauthorizedException",
]
