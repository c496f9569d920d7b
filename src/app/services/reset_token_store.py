"""
Reset Token Store

Lifecycle of stateful, one-time password reset tokens: create, verify,
consume, invalidate and sweep. Operates inside an already entered
UnitOfWork; the caller owns the commit.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from src.libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken

logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=1)
RETENTION = timedelta(hours=24)
TOKEN_BYTES = 32


class IssuedResetToken(BaseModel):
    """Plain token handed to the delivery channel, never stored elsewhere"""

    token: str
    expires_at: datetime
    user_id: UUID


class ResetTokenStore:
    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self._clock = clock

    async def create(self, email: str) -> Optional[IssuedResetToken]:
        """
        Create a reset token for the user owning the email.

        Returns None when no active user matches. Callers must answer the
        same way in both cases so account existence is not revealed.
        Existing tokens of the user are left untouched.
        """
        user = await self.uow.users.get_by_email(email)
        if user is None:
            return None

        now = self._clock()
        reset_token = PasswordResetToken(
            user_id=user.id,
            token=secrets.token_urlsafe(TOKEN_BYTES),
            used=False,
            created_at=now,
            expires_at=now + TOKEN_TTL,
        )
        await self.uow.password_reset_tokens.create(reset_token)

        return IssuedResetToken(
            token=reset_token.token,
            expires_at=reset_token.expires_at,
            user_id=user.id,
        )

    async def verify(self, token: str) -> Result[UUID]:
        """
        Read-only validity check.

        Returns:
            Result with the owning user id, or Error with code
            INVALID_TOKEN, TOKEN_ALREADY_USED or TOKEN_EXPIRED
        """
        reset_token = await self.uow.password_reset_tokens.get_by_token(token)
        if reset_token is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid password reset token"))

        if reset_token.used:
            return Return.err(
                Error("TOKEN_ALREADY_USED", "Password reset token has already been used")
            )

        if self._clock() > reset_token.expires_at:
            return Return.err(Error("TOKEN_EXPIRED", "Password reset token has expired"))

        return Return.ok(reset_token.user_id)

    async def consume(self, token: str) -> bool:
        """Atomically mark the token used. True only for the single winning caller."""
        return await self.uow.password_reset_tokens.mark_used(token, self._clock())

    async def invalidate_all(self, user_id: UUID) -> int:
        """Neutralize every unused token of a user"""
        return await self.uow.password_reset_tokens.invalidate_all_by_user_id(user_id, self._clock())

    async def sweep_expired(self) -> int:
        """Delete tokens created more than 24 hours ago, used or not"""
        return await self.uow.password_reset_tokens.delete_created_before(self._clock() - RETENTION)

    async def has_recent_request(self, email: str, minutes: int = 5) -> bool:
        """
        Rate limiting helper.

        Fails open: a ledger fault is logged and reported as no recent
        request so a legitimate reset is never blocked.
        """
        since = self._clock() - timedelta(minutes=minutes)
        try:
            count = await self.uow.password_reset_tokens.count_created_since_by_email(email, since)
        except SQLAlchemyError as exc:
            logger.warning(f"Recent reset lookup failed, allowing request: {exc.__class__.__name__}")
            await self.uow.rollback()
            return False
        return count > 0
