"""Batch scoring domain exceptions."""

from .base import DomainException


class BatchAlreadyRunningException(DomainException):
    """Raised when a batch run is triggered while another one is in progress."""

    def __init__(self):
        super().__init__(
            message="A score batch run is already in progress",
            code="BATCH_ALREADY_RUNNING",
        )
