"""
DigitalProduct Entity

A downloadable artifact sold in the catalog.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import ProductType


class DigitalProduct(SQLModel, table=True):
    """
    DigitalProduct entity - a file sold to customers.

    Business Rules:
    - download_limit caps downloads per purchase, read at check time so
      admin changes apply to already issued links
    - file_url points at the storage location resolved by the file host
    """

    __tablename__ = "digital_products"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=255)
    slug: str = Field(unique=True, index=True, max_length=255)
    product_type: ProductType = Field(default=ProductType.pdf)
    file_url: str = Field(max_length=500)
    download_limit: int = Field(default=3)
    is_published: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
