"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from nexoscore.domain.entities import (
    CustomerRelationship,
    Merchant,
    ReminderEvent,
    ScoreSnapshot,
    TransactionEvent,
)


class MerchantRepository(ABC):
    """
    Abstract repository for Merchant reads.

    Merchants are created by the onboarding flow; the scoring service
    never creates or deletes them.
    """

    @abstractmethod
    async def get_by_id(self, merchant_id: str) -> Optional[Merchant]:
        """
        Retrieve a merchant by ID.

        Args:
            merchant_id: The merchant's unique identifier

        Returns:
            The merchant if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_phone(self, phone: str) -> Optional[Merchant]:
        """Retrieve a merchant by E.164 phone number."""
        ...

    @abstractmethod
    async def get_by_national_id(self, national_id: str) -> Optional[Merchant]:
        """Retrieve a merchant by national identity number (cédula)."""
        ...

    @abstractmethod
    async def list_active_ids(self) -> List[str]:
        """
        List the IDs of every active merchant.

        Returns:
            Merchant IDs in a stable order
        """
        ...

    @abstractmethod
    async def get_top_scored(self, limit: int = 50) -> List[Merchant]:
        """
        Retrieve active merchants with a positive score, best first.

        Args:
            limit: Maximum number of merchants to return
        """
        ...

    @abstractmethod
    async def get_active_scores(self) -> List[int]:
        """Current scores of every active merchant that has been scored."""
        ...


class ActivityRepository(ABC):
    """
    Abstract repository for the activity a merchant generates.

    Customers, transactions, reminders and usage intents are written by
    the messaging flows; scoring only reads them.
    """

    @abstractmethod
    async def get_customers(self, merchant_id: str) -> List[CustomerRelationship]:
        """Retrieve all customer relationships of a merchant."""
        ...

    @abstractmethod
    async def get_transactions_since(
        self,
        merchant_id: str,
        since: datetime,
    ) -> List[TransactionEvent]:
        """
        Retrieve transactions logged at or after ``since``.

        Returns:
            Transactions ordered by created_at descending
        """
        ...

    @abstractmethod
    async def get_recent_reminders(
        self,
        merchant_id: str,
        limit: int = 100,
    ) -> List[ReminderEvent]:
        """Retrieve the most recent reminders, newest first."""
        ...

    @abstractmethod
    async def get_intents(self, merchant_id: str) -> List[str]:
        """Retrieve the intents recorded in the merchant's message log."""
        ...


class ScoreRepository(ABC):
    """
    Abstract repository for ScoreSnapshot persistence.

    Snapshots are append-only. Saving a snapshot also moves the
    merchant's ``current_score`` pointer, as a single unit of work.
    """

    @abstractmethod
    async def save(self, snapshot: ScoreSnapshot) -> ScoreSnapshot:
        """
        Persist a snapshot and update the merchant's current score.

        Both writes commit together or not at all.

        Args:
            snapshot: The snapshot to save

        Returns:
            The saved snapshot
        """
        ...

    @abstractmethod
    async def get_history(
        self,
        merchant_id: str,
        limit: int = 30,
    ) -> List[ScoreSnapshot]:
        """
        Retrieve snapshots of a merchant.

        Returns:
            Snapshots ordered by created_at descending
        """
        ...
