"""
Use Case: Sweep Password Reset Tokens

Periodic maintenance deleting reset tokens older than 24 hours.
"""

import logging

from pydantic import BaseModel

from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Result, Return

logger = logging.getLogger(__name__)


class SweepResetTokensResponse(BaseModel):
    """Response DTO for SweepResetTokensUseCase"""

    deleted_count: int


class SweepResetTokensUseCase:
    """
    Delete reset tokens created more than 24 hours ago, used or not.

    Not correctness-critical: expired tokens are rejected by verify anyway.
    Intended to run from a daily scheduler hitting the admin endpoint.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self) -> Result[SweepResetTokensResponse]:
        async with self.uow:
            deleted = await ResetTokenStore(self.uow).sweep_expired()
            await self.uow.commit()

            logger.info(f"Swept {deleted} password reset token(s)")
            return Return.ok(SweepResetTokensResponse(deleted_count=deleted))
