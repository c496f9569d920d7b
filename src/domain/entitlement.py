"""
PurchaseEntitlement Value Object

Read-only view over the order, order-item and download-log ledgers.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class PurchaseEntitlement(BaseModel):
    """
    Right of a user to download a product under a completed order.

    download_limit is copied from the product at query time and
    download_count is the number of logged downloads for the exact
    (user_id, product_id, order_id) triple.
    """

    user_id: UUID
    product_id: UUID
    order_id: UUID
    purchase_date: datetime
    download_count: int
    download_limit: int

    @property
    def remaining(self) -> int:
        return max(self.download_limit - self.download_count, 0)

    def can_download(self) -> bool:
        return self.download_count < self.download_limit
