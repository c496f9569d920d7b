"""
Order and OrderItem Entities

Purchase records that back download entitlements.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, UniqueConstraint

from src.domain.base import utcnow
from .enums import OrderStatus


class Order(SQLModel, table=True):
    """
    Order entity - a checkout by a user.

    Business Rules:
    - Only completed orders grant download entitlements
    - Payment capture is handled elsewhere; this only records the outcome
    """

    __tablename__ = "orders"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", index=True)
    status: OrderStatus = Field(default=OrderStatus.pending)
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    currency: str = Field(default="USD", max_length=3)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_orders_status", "status"),
        Index("idx_orders_created_at", "created_at"),
    )


class OrderItem(SQLModel, table=True):
    """
    OrderItem entity - one purchased product inside an order.

    Business Rules:
    - download_count is the stored quota counter for this purchase
    - download_count only moves together with a download log append
    - A product appears at most once per order; quantity carries multiples
    """

    __tablename__ = "order_items"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    order_id: UUID = Field(foreign_key="orders.id", index=True)
    digital_product_id: UUID = Field(foreign_key="digital_products.id", index=True)
    title: str = Field(max_length=255)
    price: Decimal = Field(default=Decimal("0"), max_digits=10, decimal_places=2)
    quantity: int = Field(default=1)
    download_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("order_id", "digital_product_id", name="uq_order_items_order_product"),
    )
