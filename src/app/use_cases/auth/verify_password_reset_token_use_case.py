"""
Verify Password Reset Token Use Case

Read-only check used by the reset form before asking for a new password.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import VerifyPasswordResetTokenResponse

logger = logging.getLogger(__name__)


class VerifyPasswordResetTokenUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[VerifyPasswordResetTokenResponse]:
        async with self.uow:
            try:
                verification = await ResetTokenStore(self.uow).verify(token)
            except SQLAlchemyError as exc:
                logger.error(f"Password reset token check failed: {exc.__class__.__name__}")
                return Return.err(
                    Error("LEDGER_UNAVAILABLE", "Password reset temporarily unavailable")
                )

            if verification.is_err():
                return Return.err(verification.error)

            return Return.ok(VerifyPasswordResetTokenResponse(valid=True))
