from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        """Get password reset token by its token string"""
        pass

    @abstractmethod
    async def mark_used(self, token: str, used_at: datetime) -> bool:
        """Flip used false -> true for the token. Returns True if a row changed."""
        pass

    @abstractmethod
    async def invalidate_all_by_user_id(self, user_id: UUID, used_at: datetime) -> int:
        """Mark every unused token of a user as used. Returns count."""
        pass

    @abstractmethod
    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete tokens created before cutoff regardless of state. Returns count."""
        pass

    @abstractmethod
    async def count_created_since_by_email(self, email: str, since: datetime) -> int:
        """Count tokens created since a moment for the user with this email"""
        pass
