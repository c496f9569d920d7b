"""
Get Download History Use Case

Lists a user's past downloads of a product.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.entitlement_checker import EntitlementChecker
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import DownloadHistoryEntry, DownloadHistoryResponse

logger = logging.getLogger(__name__)


class GetDownloadHistoryUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, product_id: UUID) -> Result[DownloadHistoryResponse]:
        async with self.uow:
            try:
                entries = await EntitlementChecker(self.uow).download_history(user_id, product_id)
            except SQLAlchemyError as exc:
                logger.error(f"Ledger unavailable while reading download history: {exc.__class__.__name__}")
                return Return.err(Error("LEDGER_UNAVAILABLE", "Download service temporarily unavailable"))

            return Return.ok(
                DownloadHistoryResponse(
                    product_id=str(product_id),
                    downloads=[
                        DownloadHistoryEntry(
                            downloaded_at=entry.downloaded_at,
                            ip_address=entry.ip_address,
                        )
                        for entry in entries
                    ],
                )
            )
