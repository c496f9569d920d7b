from typing import List
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.download_log_repository import IDownloadLogRepository
from src.domain.entities import DownloadLog


class DownloadLogRepository(IDownloadLogRepository):
    """DownloadLog repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: DownloadLog) -> DownloadLog:
        """Append a download log entry (immutable)"""
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def count_for(self, user_id: UUID, product_id: UUID, order_id: UUID) -> int:
        """Count logged downloads for the exact triple"""
        stmt = select(func.count(DownloadLog.id)).where(
            DownloadLog.user_id == user_id,
            DownloadLog.digital_product_id == product_id,
            DownloadLog.order_id == order_id,
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def list_for_user_product(self, user_id: UUID, product_id: UUID) -> List[DownloadLog]:
        """Download history of a user for a product, newest first"""
        stmt = (
            select(DownloadLog)
            .where(
                DownloadLog.user_id == user_id,
                DownloadLog.digital_product_id == product_id,
            )
            .order_by(DownloadLog.downloaded_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())
