"""External collaborator interfaces."""

from abc import ABC, abstractmethod
from typing import List


class MerchantDirectory(ABC):
    """
    Cross-merchant directory used for network validation.

    Answers whether a merchant's customers are themselves registered
    merchants. Callers bound the lookup with a timeout.
    """

    @abstractmethod
    async def count_registered_phones(self, phones: List[str]) -> int:
        """
        Count how many of the given phones belong to registered merchants.

        Args:
            phones: Customer phone numbers

        Returns:
            Number of distinct phones that match a registered merchant
        """
        ...
