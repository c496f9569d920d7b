"""Maintenance use cases for periodic housekeeping."""

from .sweep_reset_tokens_use_case import SweepResetTokensUseCase, SweepResetTokensResponse

__all__ = [
    "SweepResetTokensUseCase",
    "SweepResetTokensResponse",
]
