"""
DownloadLog Entity

Append-only audit trail of granted downloads.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class DownloadLog(SQLModel, table=True):
    """
    DownloadLog entity - one row per granted download.

    Business Rules:
    - Immutable (never updated or deleted by this service)
    - Written exactly once per authorized transfer
    - Rows for (user_id, digital_product_id, order_id) form the quota count
    """

    __tablename__ = "download_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id")
    digital_product_id: UUID = Field(foreign_key="digital_products.id")
    order_id: UUID = Field(foreign_key="orders.id")

    ip_address: Optional[str] = Field(default=None, max_length=45)  # IPv4/IPv6
    user_agent: Optional[str] = Field(default=None)

    downloaded_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_download_logs_user_id", "user_id"),
        Index("idx_download_logs_product_id", "digital_product_id"),
        Index("idx_download_logs_downloaded_at", "downloaded_at"),
        Index("idx_download_logs_triple", "user_id", "digital_product_id", "order_id"),
    )
