"""
Password Reset Use Case DTOs (Data Transfer Objects)

Response classes for the password reset flow.
"""

from pydantic import BaseModel


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    status: str
    message: str


class VerifyPasswordResetTokenResponse(BaseModel):
    """Response for verify password reset token use case"""

    valid: bool


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    status: str
    message: str
