from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, func
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.order_repository import IOrderRepository
from src.domain.entitlement import PurchaseEntitlement
from src.domain.entities import DigitalProduct, DownloadLog, Order, OrderItem, OrderStatus


class OrderRepository(IOrderRepository):
    """Order ledger implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _purchases_query(self, user_id: UUID):
        return (
            select(
                Order.id.label("order_id"),
                Order.created_at.label("purchase_date"),
                OrderItem.digital_product_id.label("product_id"),
                DigitalProduct.download_limit.label("download_limit"),
                func.count(DownloadLog.id.distinct()).label("download_count"),
            )
            .select_from(Order)
            .join(OrderItem, OrderItem.order_id == Order.id)
            .join(DigitalProduct, DigitalProduct.id == OrderItem.digital_product_id)
            .outerjoin(
                DownloadLog,
                and_(
                    DownloadLog.order_id == Order.id,
                    DownloadLog.digital_product_id == DigitalProduct.id,
                    DownloadLog.user_id == Order.user_id,
                ),
            )
            .where(Order.user_id == user_id, Order.status == OrderStatus.completed)
            .group_by(
                Order.id,
                Order.created_at,
                OrderItem.digital_product_id,
                DigitalProduct.download_limit,
            )
            .order_by(Order.created_at.desc())
        )

    @staticmethod
    def _to_entitlement(user_id: UUID, row) -> PurchaseEntitlement:
        return PurchaseEntitlement(
            user_id=user_id,
            product_id=row.product_id,
            order_id=row.order_id,
            purchase_date=row.purchase_date,
            download_count=int(row.download_count),
            download_limit=row.download_limit,
        )

    async def get_latest_completed_purchase(
        self, user_id: UUID, product_id: UUID
    ) -> Optional[PurchaseEntitlement]:
        """Most recent completed order of the user containing the product"""
        stmt = (
            self._purchases_query(user_id)
            .where(OrderItem.digital_product_id == product_id)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        if row is None:
            return None
        return self._to_entitlement(user_id, row)

    async def list_completed_purchases(self, user_id: UUID) -> List[PurchaseEntitlement]:
        """All completed product purchases of a user, newest first"""
        result = await self.session.execute(self._purchases_query(user_id))
        return [self._to_entitlement(user_id, row) for row in result.all()]

    async def increment_download_count(
        self,
        user_id: UUID,
        product_id: UUID,
        order_id: UUID,
        enforce_limit: bool = True,
    ) -> bool:
        """
        Compare-and-increment on order_items.download_count.

        The limit predicate is evaluated by the database inside the UPDATE,
        so two concurrent callers racing for the last download serialize on
        the row and only one of them sees a matching row.
        """
        owned_order = select(Order.id).where(
            Order.id == order_id,
            Order.user_id == user_id,
            Order.status == OrderStatus.completed,
        )
        stmt = update(OrderItem).where(
            OrderItem.order_id == order_id,
            OrderItem.digital_product_id == product_id,
            OrderItem.order_id.in_(owned_order),
        )
        if enforce_limit:
            current_limit = (
                select(DigitalProduct.download_limit)
                .where(DigitalProduct.id == product_id)
                .scalar_subquery()
            )
            stmt = stmt.where(OrderItem.download_count < current_limit)

        stmt = stmt.values(download_count=OrderItem.download_count + 1).execution_options(
            synchronize_session=False
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
