from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from src.api.error import ClientError, ServerError
from src.app.services.download_token_codec import DownloadLink
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.downloads import (
    DownloadAuthorizationUseCase,
    DownloadHistoryResponse,
    GetDownloadHistoryUseCase,
    LibraryResponse,
    ListLibraryUseCase,
)
from src.depends import get_current_user, get_download_authorization, get_unit_of_work
from src.libs.result import Error

router = APIRouter(prefix="/products", tags=["Downloads"])

DENIAL_STATUS = {
    "PRODUCT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "NOT_PURCHASED": status.HTTP_403_FORBIDDEN,
    "LIMIT_EXCEEDED": status.HTTP_403_FORBIDDEN,
    "INVALID_OR_EXPIRED_TOKEN": status.HTTP_403_FORBIDDEN,
}


def _parse_product_id(product_id: str) -> UUID:
    try:
        return UUID(product_id)
    except ValueError:
        raise ClientError(
            Error("PRODUCT_NOT_FOUND", "Product not found"),
            status_code=status.HTTP_404_NOT_FOUND,
        )


def _raise_for_error(error: Error):
    if error.code in DENIAL_STATUS:
        raise ClientError(error, status_code=DENIAL_STATUS[error.code])
    elif error.code == "LEDGER_UNAVAILABLE":
        raise ServerError(error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    raise ServerError(error)


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45]
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip[:45]
    return request.client.host if request.client else None


@router.get("/library", status_code=status.HTTP_200_OK, response_model=LibraryResponse)
async def list_library(
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Purchased Products

    Lists completed purchases of the caller with remaining downloads.
    """
    result = await ListLibraryUseCase(uow).execute(user_id)
    if result.is_err():
        _raise_for_error(result.error)
    return result.value


@router.post(
    "/{product_id}/download-link",
    status_code=status.HTTP_200_OK,
    response_model=DownloadLink,
)
async def create_download_link(
    product_id: str,
    user_id: UUID = Depends(get_current_user),
    use_case: DownloadAuthorizationUseCase = Depends(get_download_authorization),
):
    """
    Mint Download Link

    Issues a signed, time-limited link for a purchased product.

    Raises:
        - 403 Forbidden: NOT_PURCHASED or LIMIT_EXCEEDED
        - 404 Not Found: PRODUCT_NOT_FOUND
        - 503 Service Unavailable: LEDGER_UNAVAILABLE
    """
    result = await use_case.grant_download_link(user_id, _parse_product_id(product_id))

    if result.is_err():
        _raise_for_error(result.error)

    return result.value


@router.get("/download/{product_id}", status_code=status.HTTP_302_FOUND)
async def download_product(
    product_id: str,
    request: Request,
    token: Optional[str] = None,
    order: Optional[str] = None,
    expires: Optional[str] = None,
    user_id: UUID = Depends(get_current_user),
    use_case: DownloadAuthorizationUseCase = Depends(get_download_authorization),
):
    """
    Redeem Download Link

    Verifies the signed link, consumes one download of the purchase and
    redirects to the file resource.

    Raises:
        - 400 Bad Request: INVALID_DOWNLOAD_LINK (missing or malformed parameters)
        - 403 Forbidden: INVALID_OR_EXPIRED_TOKEN, LIMIT_EXCEEDED or NOT_PURCHASED
        - 404 Not Found: PRODUCT_NOT_FOUND
        - 503 Service Unavailable: LEDGER_UNAVAILABLE
    """
    invalid_link = Error("INVALID_DOWNLOAD_LINK", "Invalid download link")
    if not token or not order or not expires:
        raise ClientError(invalid_link, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        order_id = UUID(order)
        expires_at_millis = int(expires)
    except ValueError:
        raise ClientError(invalid_link, status_code=status.HTTP_400_BAD_REQUEST)

    result = await use_case.redeem_download(
        _parse_product_id(product_id),
        order_id,
        user_id,
        token,
        expires_at_millis,
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )

    if result.is_err():
        _raise_for_error(result.error)

    file_ref = result.value
    return RedirectResponse(
        file_ref.file_url,
        status_code=status.HTTP_302_FOUND,
        headers={
            "Content-Disposition": f'attachment; filename="{file_ref.filename}"',
            "Cache-Control": "private, no-cache",
        },
    )


@router.get(
    "/{product_id}/downloads",
    status_code=status.HTTP_200_OK,
    response_model=DownloadHistoryResponse,
)
async def download_history(
    product_id: str,
    user_id: UUID = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Download history of the caller for a product, newest first"""
    result = await GetDownloadHistoryUseCase(uow).execute(user_id, _parse_product_id(product_id))
    if result.is_err():
        _raise_for_error(result.error)
    return result.value
