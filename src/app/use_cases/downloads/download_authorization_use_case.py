"""
Download Authorization Use Case

Single orchestration point to mint and redeem download links.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.app.services.download_token_codec import DownloadLink, DownloadTokenCodec
from src.app.services.entitlement_checker import EntitlementChecker
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import FileRef

logger = logging.getLogger(__name__)

DEFAULT_LINK_TTL = timedelta(minutes=15)


class DownloadAuthorizationUseCase:
    """
    Use case for granting and redeeming download links.

    Business Rules:
    - A link is only minted for a completed purchase with downloads left
    - Links are bound to product, order, user and an expiry deadline
    - Redemption re-checks the quota atomically with the log append
    - The quota belongs to the purchase, not to a link
    - Ledger faults deny the request (fail closed)
    - There is no revocation; a link lives until it expires
    """

    def __init__(
        self,
        uow: UnitOfWork,
        codec: DownloadTokenCodec,
        link_ttl: timedelta = DEFAULT_LINK_TTL,
    ):
        self.uow = uow
        self.codec = codec
        self.link_ttl = link_ttl

    async def grant_download_link(self, user_id: UUID, product_id: UUID) -> Result[DownloadLink]:
        """
        Mint a signed download link.

        Errors:
            - PRODUCT_NOT_FOUND: No such product
            - NOT_PURCHASED: No completed order contains the product
            - LIMIT_EXCEEDED: All downloads of the purchase are used
            - LEDGER_UNAVAILABLE: Storage fault
        """
        async with self.uow:
            try:
                product = await self.uow.products.get_by_id(product_id)
                if product is None:
                    return Return.err(Error("PRODUCT_NOT_FOUND", "Product not found"))

                entitlement = await EntitlementChecker(self.uow).get_entitlement(user_id, product_id)
            except SQLAlchemyError as exc:
                logger.error(f"Ledger unavailable while granting download link: {exc.__class__.__name__}")
                return Return.err(Error("LEDGER_UNAVAILABLE", "Download service temporarily unavailable"))

            if entitlement is None:
                return Return.err(
                    Error("NOT_PURCHASED", "You have not purchased this product")
                )

            if not entitlement.can_download():
                return Return.err(
                    Error(
                        "LIMIT_EXCEEDED",
                        f"You have reached the maximum number of downloads ({entitlement.download_limit}) for this product",
                    )
                )

            link = self.codec.issue(product_id, entitlement.order_id, user_id, self.link_ttl)
            logger.info(
                f"Download link issued: user={user_id} product={product_id} order={entitlement.order_id}"
            )
            return Return.ok(link)

    async def redeem_download(
        self,
        product_id: UUID,
        order_id: UUID,
        user_id: UUID,
        token: str,
        expires_at_millis: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[FileRef]:
        """
        Redeem a download link and log the transfer.

        Errors:
            - INVALID_OR_EXPIRED_TOKEN: Signature mismatch or deadline passed
            - PRODUCT_NOT_FOUND: No such product
            - LIMIT_EXCEEDED: Quota consumed, possibly by a concurrent redemption
            - NOT_PURCHASED: Order is not a completed purchase of this user
            - LEDGER_UNAVAILABLE: Storage fault
        """
        if not self.codec.verify(product_id, order_id, user_id, token, expires_at_millis):
            return Return.err(
                Error("INVALID_OR_EXPIRED_TOKEN", "Invalid or expired download link")
            )

        async with self.uow:
            try:
                product = await self.uow.products.get_by_id(product_id)
                if product is None:
                    return Return.err(Error("PRODUCT_NOT_FOUND", "Product not found"))

                checker = EntitlementChecker(self.uow)
                entry = await checker.claim_download(
                    user_id, product_id, order_id, ip_address, user_agent
                )
                if entry is None:
                    if await checker.has_exceeded_limit(user_id, product_id, order_id):
                        return Return.err(
                            Error(
                                "LIMIT_EXCEEDED",
                                f"You have reached the maximum number of downloads ({product.download_limit}) for this product",
                            )
                        )
                    return Return.err(
                        Error("NOT_PURCHASED", "You have not purchased this product or access denied")
                    )

                await self.uow.commit()
            except SQLAlchemyError as exc:
                logger.error(f"Ledger unavailable while redeeming download: {exc.__class__.__name__}")
                return Return.err(Error("LEDGER_UNAVAILABLE", "Download service temporarily unavailable"))

            logger.info(f"Download granted: user={user_id} product={product_id} order={order_id}")
            return Return.ok(FileRef.for_product(product))
