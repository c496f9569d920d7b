from datetime import timedelta
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import verify_jwt
from src.app.services.download_token_codec import DownloadTokenCodec
from src.app.services.security_settings import SecuritySettings
from src.app.use_cases.downloads import DownloadAuthorizationUseCase

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_security_settings(request: Request) -> SecuritySettings:
    """Settings built once by create_app"""
    return request.app.state.security


def get_download_token_codec(
    settings: SecuritySettings = Depends(get_security_settings),
) -> DownloadTokenCodec:
    return DownloadTokenCodec(
        settings.download_token_secret,
        base_path=settings.download_base_path,
    )


def get_download_authorization(
    uow=Depends(get_unit_of_work),
    codec: DownloadTokenCodec = Depends(get_download_token_codec),
    settings: SecuritySettings = Depends(get_security_settings),
) -> DownloadAuthorizationUseCase:
    return DownloadAuthorizationUseCase(
        uow,
        codec,
        link_ttl=timedelta(minutes=settings.download_link_ttl_minutes),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Authenticated user id

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    token = credentials.credentials
    payload = verify_jwt(token)

    if payload is None or "user_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    try:
        return UUID(payload["user_id"])
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
