"""
Confirm Password Reset Use Case

Handles password reset confirmation with one-time token consumption.
"""

import logging

import bcrypt
from sqlalchemy.exc import SQLAlchemyError

from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse

logger = logging.getLogger(__name__)


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Token must exist, be unused and not expired
    - New password must be at least 8 characters
    - Password is hashed with bcrypt using the configured rounds
    - Token consumption is a compare-and-swap; losing a race aborts the change
    - Remaining unused tokens of the user are invalidated
    """

    def __init__(self, uow: UnitOfWork, bcrypt_rounds: int = 12):
        self.uow = uow
        self.bcrypt_rounds = bcrypt_rounds

    def _validate_password(self, password: str) -> Result[None]:
        """
        Validate password complexity.

        Args:
            password: Password to validate

        Returns:
            Result with None if valid, or Error if invalid
        """
        if len(password) < 8:
            return Return.err(
                Error(
                    "INVALID_PASSWORD",
                    "Password must be at least 8 characters long",
                )
            )

        return Return.ok(None)

    async def execute(self, token: str, new_password: str) -> Result[ConfirmPasswordResetResponse]:
        """
        Execute confirm password reset use case.

        Args:
            token: Password reset token (plain text from the reset link)
            new_password: New password to set

        Returns:
            Result with confirmation status, or Error

        Errors:
            - INVALID_TOKEN: Token not found
            - TOKEN_EXPIRED: Token has expired
            - TOKEN_ALREADY_USED: Token has already been used
            - INVALID_PASSWORD: Password does not meet complexity requirements
            - LEDGER_UNAVAILABLE: Storage fault
        """
        password_validation = self._validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            store = ResetTokenStore(self.uow)
            try:
                verification = await store.verify(token)
                if verification.is_err():
                    return Return.err(verification.error)

                user = await self.uow.users.get_by_id(verification.value)
                if user is None:
                    return Return.err(Error("INVALID_TOKEN", "Invalid password reset token"))

                password_hash = bcrypt.hashpw(new_password.encode(), bcrypt.gensalt(self.bcrypt_rounds))
                user.password_hash = password_hash.decode()
                await self.uow.users.update(user)

                if not await store.consume(token):
                    # Lost the race to a concurrent confirmation
                    await self.uow.rollback()
                    return Return.err(
                        Error(
                            "TOKEN_ALREADY_USED",
                            "Password reset token has already been used",
                        )
                    )

                await store.invalidate_all(user.id)
                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.error(f"Password reset confirmation failed: {exc.__class__.__name__}")
                return Return.err(
                    Error("LEDGER_UNAVAILABLE", "Password reset temporarily unavailable")
                )

            logger.info(f"Password reset completed for user {user.id}")

            return Return.ok(
                ConfirmPasswordResetResponse(
                    status="success",
                    message="Password has been reset successfully",
                )
            )
