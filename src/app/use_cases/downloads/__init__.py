"""
Download Use Cases

Minting and redeeming download links, history and library views.
"""

from .download_authorization_use_case import DownloadAuthorizationUseCase, DEFAULT_LINK_TTL
from .get_download_history_use_case import GetDownloadHistoryUseCase
from .list_library_use_case import ListLibraryUseCase
from .dtos import (
    FileRef,
    DownloadHistoryEntry,
    DownloadHistoryResponse,
    LibraryItem,
    LibraryResponse,
)

__all__ = [
    # Use Cases
    "DownloadAuthorizationUseCase",
    "GetDownloadHistoryUseCase",
    "ListLibraryUseCase",
    "DEFAULT_LINK_TTL",
    # DTOs
    "FileRef",
    "DownloadHistoryEntry",
    "DownloadHistoryResponse",
    "LibraryItem",
    "LibraryResponse",
]
