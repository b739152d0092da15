"""Delivery hooks handing issued codes to an out-of-band channel."""

import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

CodeDelivery = Callable[[str, str, str], Awaitable[tuple[bool, str | None]]]


async def log_code_delivery(email: str, code: str, purpose: str) -> tuple[bool, str | None]:
    """Development stand-in for email delivery: write the code to the log."""
    logger.info("[dev delivery] %s code for %s: %s", purpose, email, code)
    return True, None


async def discard_code_delivery(email: str, code: str, purpose: str) -> tuple[bool, str | None]:
    """Used outside development when no delivery channel is configured."""
    logger.error("No delivery channel configured; %s code for %s was not sent", purpose, email)
    return False, "No delivery channel configured."
