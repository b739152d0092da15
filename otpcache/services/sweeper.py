"""Background task that reclaims memory held by expired entries."""

import logging

import anyio

from otpcache.services.store import EntryStore

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Periodically call `purge_expired` on a store.

    Only bounds memory use: `check` already ignores expired entries, so a late or
    disabled sweep never lets an expired code through.
    """

    def __init__(self, store: EntryStore, interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("Sweep interval must be positive.")
        self.store = store
        self.interval_seconds = interval_seconds

    async def sweep_once(self) -> int:
        return await self.store.purge_expired()

    async def run(self) -> None:
        """Sweep forever; cancel the surrounding task to stop."""
        logger.info("Expiry sweeper started (every %.1fs)", self.interval_seconds)
        while True:
            await anyio.sleep(self.interval_seconds)
            try:
                await self.sweep_once()
            except Exception:
                # a failed pass is retried on the next tick
                logger.exception("Expiry sweep failed")
