"""
Admin API Routes - Maintenance Endpoints

These endpoints are for internal schedulers.
Authentication is via Admin API Key, not user JWTs.
"""

from fastapi import APIRouter, Depends, status

from src.api.error import ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.maintenance import SweepResetTokensResponse, SweepResetTokensUseCase
from src.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/maintenance/sweep-reset-tokens",
    status_code=status.HTTP_200_OK,
    response_model=SweepResetTokensResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def sweep_reset_tokens(uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Sweep Password Reset Tokens

    Deletes reset tokens created more than 24 hours ago.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 500 Internal Server Error: Server error
    """
    result = await SweepResetTokensUseCase(uow).execute()

    if result.is_err():
        raise ServerError(result.error)

    return result.value
