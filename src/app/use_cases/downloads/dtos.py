"""
Download Use Case DTOs (Data Transfer Objects)

Response classes for the download domain.
"""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import DigitalProduct, ProductType

CONTENT_TYPES = {
    ProductType.pdf: ("application/pdf", "pdf"),
    ProductType.audio: ("audio/mpeg", "mp3"),
    ProductType.video: ("video/mp4", "mp4"),
    ProductType.ebook: ("application/epub+zip", "epub"),
}


def sanitize_filename(name: str) -> str:
    return re.sub(r"[^a-z0-9_-]", "_", name, flags=re.IGNORECASE).lower()


class FileRef(BaseModel):
    """Reference to the file behind a granted download; bytes are served by the file host"""

    product_id: str
    file_url: str
    filename: str
    content_type: str

    @classmethod
    def for_product(cls, product: DigitalProduct) -> "FileRef":
        content_type, extension = CONTENT_TYPES.get(
            product.product_type, ("application/octet-stream", "bin")
        )
        return cls(
            product_id=str(product.id),
            file_url=product.file_url,
            filename=f"{sanitize_filename(product.title)}.{extension}",
            content_type=content_type,
        )


class DownloadHistoryEntry(BaseModel):
    downloaded_at: datetime
    ip_address: Optional[str] = None


class DownloadHistoryResponse(BaseModel):
    """Response for download history use case"""

    product_id: str
    downloads: List[DownloadHistoryEntry]


class LibraryItem(BaseModel):
    """One purchased product in a user's library"""

    product_id: str
    title: str
    product_type: str
    order_id: str
    purchase_date: datetime
    download_count: int
    download_limit: int
    remaining: int


class LibraryResponse(BaseModel):
    """Response for library listing use case"""

    items: List[LibraryItem]
