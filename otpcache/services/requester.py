"""Email-ownership flow orchestrating the verification cache and code delivery."""

import logging

from fastapi import HTTPException, status

from otpcache.schemas.otp import OTPVerify
from otpcache.services.delivery import CodeDelivery
from otpcache.services.errors import StorageUnavailable
from otpcache.services.otp import VerificationCache

logger = logging.getLogger(__name__)

UNAVAILABLE_DETAIL = "Verification service temporarily unavailable. Please retry."


class VerificationRequester:
    """High-level service used by API routes; holds the cache and the delivery hook."""

    def __init__(self, cache: VerificationCache, deliver: CodeDelivery):
        self.cache = cache
        self.deliver = deliver

    async def request_code(self, email: str) -> None:
        """Issue and send a fresh code, dropping it again if delivery fails.

        Dependencies:
        - VerificationCache to mint and store the code
        - the delivery hook to push it to the user out of band
        """

        try:
            code = await self.cache.issue(email)
        except StorageUnavailable:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_DETAIL)

        sent, err = await self.deliver(email, code, self.cache.purpose)
        if not sent:
            logger.warning("Delivery of %s code failed: %s", self.cache.purpose, err)
            try:
                # a concurrent request may already have replaced the undelivered code
                if await self.cache.verify(email, code):
                    await self.cache.invalidate(email)
            except StorageUnavailable:
                # the orphaned code expires on its own
                logger.warning("Could not invalidate undelivered %s code", self.cache.purpose)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Failed to send verification code. ({err})",
            )

    async def confirm_code(self, payload: OTPVerify) -> None:
        """Validate a submitted code and close the replay window on success."""

        try:
            is_valid = await self.cache.verify(payload.email, payload.code)
            if not is_valid:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Invalid or expired verification code.",
                )
            # Separate round trips: two concurrent confirms of one code over Redis can
            # both succeed before either delete lands.
            await self.cache.invalidate(payload.email)
        except StorageUnavailable:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=UNAVAILABLE_DETAIL)
