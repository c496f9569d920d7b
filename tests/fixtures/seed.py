from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

import bcrypt
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.product_repository import ProductRepository
from src.adapter.repositories.user_repository import UserRepository
from src.domain.base import utcnow
from src.domain.entities import DigitalProduct, Order, OrderItem, OrderStatus, ProductType, User
from tests.fixtures.json_loader import TestDataLoader


class Seeder:
    """
    Writes catalog and purchase rows straight to the database.

    Helpers return ids rather than entities: the shared session is rolled
    back after every request, which expires loaded instances.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self, entity) -> UUID:
        entity_id = entity.id
        await self.session.commit()
        return entity_id

    async def create_user(self, key: str = "buyer") -> UUID:
        data = TestDataLoader.get_item("users", key)
        password_hash = bcrypt.hashpw(data["password"].encode(), bcrypt.gensalt(4)).decode()
        user = await UserRepository(self.session).create(
            User(email=data["email"], name=data["name"], password_hash=password_hash)
        )
        return await self._commit(user)

    async def create_product(self, key: str = "ebook", **overrides) -> UUID:
        data = TestDataLoader.get_item("products", key)
        data.update(overrides)
        data["product_type"] = ProductType(data["product_type"])
        product = await ProductRepository(self.session).create(DigitalProduct(**data))
        return await self._commit(product)

    async def create_order(
        self,
        user_id: UUID,
        product_ids: Iterable[UUID],
        status: OrderStatus = OrderStatus.completed,
        created_at: Optional[datetime] = None,
    ) -> UUID:
        order = Order(
            user_id=user_id,
            status=status,
            total_amount=Decimal("19.99"),
            created_at=created_at or utcnow(),
        )
        self.session.add(order)
        await self.session.flush()

        for product_id in product_ids:
            self.session.add(
                OrderItem(
                    order_id=order.id,
                    digital_product_id=product_id,
                    title="Seeded item",
                    price=Decimal("19.99"),
                )
            )
        order_id = order.id
        await self.session.commit()
        return order_id
