"""
List Library Use Case

Purchased products of a user with their download quota.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.entitlement_checker import EntitlementChecker
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import LibraryItem, LibraryResponse

logger = logging.getLogger(__name__)


class ListLibraryUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[LibraryResponse]:
        async with self.uow:
            try:
                entitlements = await EntitlementChecker(self.uow).list_entitlements(user_id)

                items = []
                for entitlement in entitlements:
                    product = await self.uow.products.get_by_id(entitlement.product_id)
                    if product is None:
                        continue
                    items.append(
                        LibraryItem(
                            product_id=str(product.id),
                            title=product.title,
                            product_type=product.product_type.value,
                            order_id=str(entitlement.order_id),
                            purchase_date=entitlement.purchase_date,
                            download_count=entitlement.download_count,
                            download_limit=entitlement.download_limit,
                            remaining=entitlement.remaining,
                        )
                    )
            except SQLAlchemyError as exc:
                logger.error(f"Ledger unavailable while listing library: {exc.__class__.__name__}")
                return Return.err(Error("LEDGER_UNAVAILABLE", "Download service temporarily unavailable"))

            return Return.ok(LibraryResponse(items=items))
