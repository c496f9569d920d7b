from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import ClientError, ServerError
from src.app.services.security_settings import SecuritySettings
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ConfirmPasswordResetResponse,
    ConfirmPasswordResetUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    VerifyPasswordResetTokenResponse,
    VerifyPasswordResetTokenUseCase,
)
from src.depends import get_security_settings, get_unit_of_work
from src.libs.result import Error

router = APIRouter(prefix="/password-reset", tags=["Password Reset"])

TOKEN_ERROR_STATUS = {
    "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "TOKEN_ALREADY_USED": status.HTTP_409_CONFLICT,
    "TOKEN_EXPIRED": status.HTTP_410_GONE,
}


def _raise_for_error(error: Error):
    if error.code in TOKEN_ERROR_STATUS:
        raise ClientError(error, status_code=TOKEN_ERROR_STATUS[error.code])
    elif error.code == "LEDGER_UNAVAILABLE":
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)


class RequestPasswordResetRequest(BaseModel):
    """
    Request password reset HTTP request payload

    Validates incoming password reset request.
    """

    email: EmailStr = Field(..., description="User email address")


@router.post(
    "/request",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=RequestPasswordResetResponse,
)
async def request_password_reset(
    request: RequestPasswordResetRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Request Password Reset

    Generates a one-time reset token valid for 1 hour.

    Security:
        - No email enumeration (same response for valid/invalid emails)
        - One request per email every 5 minutes
        - Token is cryptographically secure (32 bytes)

    Returns:
        - 202 Accepted: Always
    """
    result = await RequestPasswordResetUseCase(uow).execute(request.email)

    if result.is_err():
        raise ServerError(result.error)

    return result.value


@router.get(
    "/verify",
    status_code=status.HTTP_200_OK,
    response_model=VerifyPasswordResetTokenResponse,
)
async def verify_password_reset_token(token: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Verify Password Reset Token

    Read-only check; does not consume the token.

    Raises:
        - 400 Bad Request: INVALID_TOKEN
        - 409 Conflict: TOKEN_ALREADY_USED
        - 410 Gone: TOKEN_EXPIRED
        - 503 Service Unavailable: LEDGER_UNAVAILABLE
    """
    result = await VerifyPasswordResetTokenUseCase(uow).execute(token)

    if result.is_err():
        _raise_for_error(result.error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    """
    Confirm password reset HTTP request payload

    Validates incoming password reset confirmation request.
    """

    token: str = Field(..., description="Password reset token from the reset link")
    new_password: str = Field(..., description="New password (min 8 chars)")


@router.post(
    "/confirm",
    status_code=status.HTTP_200_OK,
    response_model=ConfirmPasswordResetResponse,
)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: SecuritySettings = Depends(get_security_settings),
):
    """
    Confirm Password Reset

    Validates the reset token, updates the password and consumes the token.

    Raises:
        - 400 Bad Request: INVALID_TOKEN or INVALID_PASSWORD
        - 409 Conflict: TOKEN_ALREADY_USED
        - 410 Gone: TOKEN_EXPIRED
        - 503 Service Unavailable: LEDGER_UNAVAILABLE
    """
    use_case = ConfirmPasswordResetUseCase(uow, bcrypt_rounds=settings.bcrypt_rounds)
    result = await use_case.execute(request.token, request.new_password)

    if result.is_err():
        _raise_for_error(result.error)

    return result.value
