"""
Password Reset Use Cases

Request, verify and confirm flows for one-time reset tokens.
"""

from .request_password_reset_use_case import RequestPasswordResetUseCase
from .verify_password_reset_token_use_case import VerifyPasswordResetTokenUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import (
    RequestPasswordResetResponse,
    VerifyPasswordResetTokenResponse,
    ConfirmPasswordResetResponse,
)

__all__ = [
    # Use Cases
    "RequestPasswordResetUseCase",
    "VerifyPasswordResetTokenUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Responses
    "RequestPasswordResetResponse",
    "VerifyPasswordResetTokenResponse",
    "ConfirmPasswordResetResponse",
]
