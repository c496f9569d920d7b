"""
Download Token Codec

Stateless, HMAC-signed download capabilities. A token proves that a user
may fetch a product under an order until an absolute deadline; nothing is
stored server side.
"""

import base64
import hashlib
import hmac
import time
from datetime import timedelta
from typing import Callable
from urllib.parse import urlencode

from pydantic import BaseModel


def current_time_millis() -> int:
    return int(time.time() * 1000)


class DownloadLink(BaseModel):
    """Signed download link handed to the client"""

    url: str
    token: str
    expires: int


class DownloadTokenCodec:
    """
    Issues and verifies download tokens.

    Canonical payload: "product_id:order_id:user_id:expires_at_millis",
    signed with HMAC-SHA256 and base64url encoded without padding.
    Rotating the secret invalidates every outstanding link.
    """

    def __init__(
        self,
        secret: str,
        base_path: str = "/products/download",
        clock: Callable[[], int] = current_time_millis,
    ):
        self._key = secret.encode()
        self.base_path = base_path.rstrip("/")
        self._clock = clock

    @staticmethod
    def _payload(product_id, order_id, user_id, expires_at_millis: int) -> str:
        return f"{product_id}:{order_id}:{user_id}:{expires_at_millis}"

    def _sign(self, payload: str) -> str:
        digest = hmac.new(self._key, payload.encode(), hashlib.sha256).digest()
        return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()

    def issue(self, product_id, order_id, user_id, ttl: timedelta) -> DownloadLink:
        """
        Issue a signed link for (product, order, user) valid for ttl.

        Args:
            product_id: Product identifier (embedded in the URL path)
            order_id: Order identifier
            user_id: Principal the link is bound to
            ttl: Lifetime of the link

        Returns:
            DownloadLink with url, token and absolute expiry in epoch millis
        """
        expires_at_millis = self._clock() + int(ttl.total_seconds() * 1000)
        token = self._sign(self._payload(product_id, order_id, user_id, expires_at_millis))
        query = urlencode({"token": token, "order": str(order_id), "expires": expires_at_millis})
        return DownloadLink(
            url=f"{self.base_path}/{product_id}?{query}",
            token=token,
            expires=expires_at_millis,
        )

    def verify(self, product_id, order_id, user_id, token: str, expires_at_millis: int) -> bool:
        """
        Check a presented token against the exact scoped fields.

        Fails closed once the deadline has passed. The signature comparison
        runs in constant time, including for tokens of a different length.
        """
        if self._clock() > expires_at_millis:
            return False

        expected = self._sign(self._payload(product_id, order_id, user_id, expires_at_millis))
        return hmac.compare_digest(token.encode(), expected.encode())
