from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import DigitalProduct


class IProductRepository(ABC):
    """DigitalProduct repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, product_id: UUID) -> Optional[DigitalProduct]:
        """Get product by ID"""
        pass

    @abstractmethod
    async def create(self, product: DigitalProduct) -> DigitalProduct:
        """Create a new product"""
        pass
