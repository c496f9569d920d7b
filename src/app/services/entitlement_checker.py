"""
Entitlement Checker

Answers whether a user may download a product under an order and keeps
the download ledger. Operates inside an already entered UnitOfWork; the
caller owns the commit.
"""

from typing import List, Optional
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entitlement import PurchaseEntitlement
from src.domain.entities import DownloadLog


class EntitlementChecker:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_entitlement(self, user_id: UUID, product_id: UUID) -> Optional[PurchaseEntitlement]:
        """Most recent completed purchase of the product, or None"""
        return await self.uow.orders.get_latest_completed_purchase(user_id, product_id)

    async def list_entitlements(self, user_id: UUID) -> List[PurchaseEntitlement]:
        return await self.uow.orders.list_completed_purchases(user_id)

    async def has_exceeded_limit(self, user_id: UUID, product_id: UUID, order_id: UUID) -> bool:
        """
        Compare logged downloads for the triple with the product's current limit.

        The limit is read at call time, so admin changes apply immediately
        to links that were already issued.
        """
        product = await self.uow.products.get_by_id(product_id)
        if product is None:
            return False

        count = await self.uow.download_logs.count_for(user_id, product_id, order_id)
        return count >= product.download_limit

    async def record_download(
        self,
        user_id: UUID,
        product_id: UUID,
        order_id: UUID,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> DownloadLog:
        """
        Append one download log entry unconditionally.

        Not idempotent: every call is one transfer. The stored counter is
        bumped alongside when a completed order item of this user matches
        the triple; without one the entry is still logged and the counter,
        which only exists on order items, is left as is.
        """
        await self.uow.orders.increment_download_count(
            user_id, product_id, order_id, enforce_limit=False
        )
        return await self._append(user_id, product_id, order_id, ip_address, user_agent)

    async def claim_download(
        self,
        user_id: UUID,
        product_id: UUID,
        order_id: UUID,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[DownloadLog]:
        """
        Reserve one download within the limit and log it.

        The limit check and the counter increment are a single conditional
        update, so concurrent claims can never over-grant. Returns None when
        no download remains or the purchase is not a completed order of
        this user.
        """
        reserved = await self.uow.orders.increment_download_count(
            user_id, product_id, order_id, enforce_limit=True
        )
        if not reserved:
            return None
        return await self._append(user_id, product_id, order_id, ip_address, user_agent)

    async def download_history(self, user_id: UUID, product_id: UUID) -> List[DownloadLog]:
        return await self.uow.download_logs.list_for_user_product(user_id, product_id)

    async def _append(self, user_id, product_id, order_id, ip_address, user_agent) -> DownloadLog:
        entry = DownloadLog(
            user_id=user_id,
            digital_product_id=product_id,
            order_id=order_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return await self.uow.download_logs.create(entry)
