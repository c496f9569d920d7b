"""
Use Cases - Backward Compatibility Shim

All use cases have been organized into domain folders:
- auth/: Password reset flows
- downloads/: Download links, history and library
- maintenance/: Periodic housekeeping

Import from subdirectories for better organization.
"""

# Re-export everything for backward compatibility
from .auth import (
    RequestPasswordResetUseCase,
    VerifyPasswordResetTokenUseCase,
    ConfirmPasswordResetUseCase,
)
from .downloads import (
    DownloadAuthorizationUseCase,
    GetDownloadHistoryUseCase,
    ListLibraryUseCase,
)
from .maintenance import SweepResetTokensUseCase

__all__ = [
    # Auth
    "RequestPasswordResetUseCase",
    "VerifyPasswordResetTokenUseCase",
    "ConfirmPasswordResetUseCase",
    # Downloads
    "DownloadAuthorizationUseCase",
    "GetDownloadHistoryUseCase",
    "ListLibraryUseCase",
    # Maintenance
    "SweepResetTokensUseCase",
]
