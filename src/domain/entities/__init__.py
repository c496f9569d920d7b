"""
Storefront Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import OrderStatus, ProductType

# Export all entities
from .user import User
from .digital_product import DigitalProduct
from .order import Order, OrderItem
from .download_log import DownloadLog
from .password_reset_token import PasswordResetToken

__all__ = [
    # Enums
    "OrderStatus",
    "ProductType",
    # Entities
    "User",
    "DigitalProduct",
    "Order",
    "OrderItem",
    "DownloadLog",
    "PasswordResetToken",
]
