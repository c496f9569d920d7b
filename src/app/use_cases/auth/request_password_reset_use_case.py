"""
Request Password Reset Use Case

Handles generating password reset tokens.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

RECENT_REQUEST_WINDOW_MINUTES = 5


def _accepted() -> RequestPasswordResetResponse:
    return RequestPasswordResetResponse(
        status="accepted",
        message="If the email exists, a password reset link has been sent",
    )


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - No email enumeration (same response for every outcome)
    - At most one request per email every 5 minutes; the check fails open
    - Older unused tokens of the user are invalidated before a new one is made
    - Token is 32 random bytes and expires in 1 hour
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with the accepted response, for known and unknown emails alike
        """
        async with self.uow:
            store = ResetTokenStore(self.uow)

            if await store.has_recent_request(email, RECENT_REQUEST_WINDOW_MINUTES):
                logger.info("Password reset request throttled")
                return Return.ok(_accepted())

            try:
                user = await self.uow.users.get_by_email(email)
                if user is None:
                    return Return.ok(_accepted())

                await store.invalidate_all(user.id)
                issued = await store.create(email)
                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.error(f"Password reset request failed: {exc.__class__.__name__}")
                return Return.ok(_accepted())

            logger.info(f"Password reset token issued for user {issued.user_id}")

            # NOTE: Delivery of issued.token (email/SMS) is handled by the
            # notification service; the link looks like
            # https://app.example.com/reset-password?token={issued.token}

            return Return.ok(_accepted())
