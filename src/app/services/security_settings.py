"""
Security Settings

Process-wide secrets and security parameters, built once at startup and
injected into the components that need them.
"""

import logging

from pydantic import BaseModel, ConfigDict

from src.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

RECOMMENDED_SECRET_BYTES = 32


class SecuritySettings(BaseModel):
    """Immutable security configuration"""

    model_config = ConfigDict(frozen=True)

    download_token_secret: str
    download_link_ttl_minutes: int = 15
    download_base_path: str = "/products/download"
    bcrypt_rounds: int = 12

    @classmethod
    def from_config(cls, config) -> "SecuritySettings":
        """
        Build settings from the application config class.

        Raises:
            ConfigurationError: download token secret is missing
        """
        secret = getattr(config, "DOWNLOAD_TOKEN_SECRET", None)
        if not secret:
            raise ConfigurationError("DOWNLOAD_TOKEN_SECRET is not configured")

        if len(secret.encode()) < RECOMMENDED_SECRET_BYTES:
            logger.warning(
                f"DOWNLOAD_TOKEN_SECRET is shorter than {RECOMMENDED_SECRET_BYTES} bytes"
            )

        return cls(
            download_token_secret=secret,
            download_link_ttl_minutes=int(getattr(config, "DOWNLOAD_LINK_TTL_MINUTES", 15)),
            download_base_path=getattr(config, "DOWNLOAD_BASE_PATH", "/products/download"),
            bcrypt_rounds=int(getattr(config, "BCRYPT_ROUNDS", 12)),
        )
