"""
PasswordResetToken Entity

One-time password reset tokens.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - one-time password reset tokens.

    Business Rules:
    - Expires 1 hour after creation, fixed at creation
    - Token is 32 random bytes, base64url encoded
    - Single-use: used flips false -> true once and never back
    - Rows older than 24 hours are swept regardless of state
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id")
    token: str = Field(unique=True, index=True, max_length=64)

    used: bool = Field(default=False)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_password_reset_expires_at", "expires_at"),
        Index("idx_password_reset_user_id", "user_id"),
        Index("idx_password_reset_created_at", "created_at"),
    )
