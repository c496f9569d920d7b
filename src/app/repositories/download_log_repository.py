from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import DownloadLog


class IDownloadLogRepository(ABC):
    """DownloadLog repository interface - application layer"""

    @abstractmethod
    async def create(self, entry: DownloadLog) -> DownloadLog:
        """Append a download log entry (immutable)"""
        pass

    @abstractmethod
    async def count_for(self, user_id: UUID, product_id: UUID, order_id: UUID) -> int:
        """Count logged downloads for the exact triple"""
        pass

    @abstractmethod
    async def list_for_user_product(self, user_id: UUID, product_id: UUID) -> List[DownloadLog]:
        """Download history of a user for a product, newest first"""
        pass
