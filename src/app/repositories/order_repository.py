from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.domain.entitlement import PurchaseEntitlement


class IOrderRepository(ABC):
    """Order ledger interface - application layer"""

    @abstractmethod
    async def get_latest_completed_purchase(
        self, user_id: UUID, product_id: UUID
    ) -> Optional[PurchaseEntitlement]:
        """Most recent completed order of the user containing the product"""
        pass

    @abstractmethod
    async def list_completed_purchases(self, user_id: UUID) -> List[PurchaseEntitlement]:
        """All completed product purchases of a user, newest first"""
        pass

    @abstractmethod
    async def increment_download_count(
        self,
        user_id: UUID,
        product_id: UUID,
        order_id: UUID,
        enforce_limit: bool = True,
    ) -> bool:
        """
        Atomically bump the stored download counter of a purchase.

        With enforce_limit the update only applies while the counter is
        below the product's current download_limit. Returns True if a row
        was updated.
        """
        pass
