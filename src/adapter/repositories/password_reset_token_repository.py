from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import PasswordResetToken, User


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        """Get password reset token by its token string"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token == token)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def mark_used(self, token: str, used_at: datetime) -> bool:
        """Conditional update: the used == False predicate is the compare-and-swap"""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.token == token, PasswordResetToken.used == False)
            .values(used=True, used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def invalidate_all_by_user_id(self, user_id: UUID, used_at: datetime) -> int:
        """Mark every unused token of a user as used"""
        stmt = (
            update(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id, PasswordResetToken.used == False)
            .values(used=True, used_at=used_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def delete_created_before(self, cutoff: datetime) -> int:
        """Delete tokens created before cutoff regardless of state"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.created_at < cutoff)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def count_created_since_by_email(self, email: str, since: datetime) -> int:
        """Count tokens created since a moment for the user with this email"""
        stmt = (
            select(func.count(PasswordResetToken.id))
            .join(User, User.id == PasswordResetToken.user_id)
            .where(
                func.lower(User.email) == email.lower(),
                PasswordResetToken.created_at > since,
            )
        )
        result = await self.session.exec(stmt)
        return result.one()
