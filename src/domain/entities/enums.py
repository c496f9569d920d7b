"""
Storefront Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status"""

    pending = "pending"
    completed = "completed"
    cancelled = "cancelled"
    refunded = "refunded"


class ProductType(str, Enum):
    """Kind of digital artifact a product delivers"""

    pdf = "pdf"
    audio = "audio"
    video = "video"
    ebook = "ebook"
