from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.product_repository import IProductRepository
from src.domain.entities import DigitalProduct


class ProductRepository(IProductRepository):
    """DigitalProduct repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, product_id: UUID) -> Optional[DigitalProduct]:
        """Get product by ID"""
        stmt = select(DigitalProduct).where(DigitalProduct.id == product_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, product: DigitalProduct) -> DigitalProduct:
        """Create a new product"""
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product
