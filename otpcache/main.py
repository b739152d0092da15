"""Application entrypoint for the verification cache service.

This module wires together the FastAPI application with its lifespan hooks:
the entry store and code generator are created once here, the expiry sweeper
runs beside request handling, and both are torn down when the process stops.
"""

import asyncio
import contextlib
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from otpcache.api.routes import verification_router
from otpcache.core.config import Settings, settings as default_settings
from otpcache.core.logging import configure_logging
from otpcache.services.codes import CodeGenerator
from otpcache.services.delivery import CodeDelivery, discard_code_delivery, log_code_delivery
from otpcache.services.redis_store import RedisEntryStore, create_redis_client
from otpcache.services.store import Clock, EntryStore, InMemoryEntryStore
from otpcache.services.sweeper import ExpirySweeper

logger = logging.getLogger(__name__)


def build_entry_store(config: Settings, clock: Clock | None = None) -> EntryStore:
    """Create the store selected by `OTP_STORE_BACKEND`."""
    if config.OTP_STORE_BACKEND == "redis":
        client = create_redis_client(config.REDIS_URL, config.OTP_STORE_TIMEOUT_SECONDS)
        return RedisEntryStore(
            client,
            clock=clock or time.time,
            timeout=config.OTP_STORE_TIMEOUT_SECONDS,
            hash_secret=config.OTP_HASH_SECRET,
        )
    return InMemoryEntryStore(clock=clock or time.monotonic)


def create_application(
    config: Settings | None = None,
    store: EntryStore | None = None,
    generator: CodeGenerator | None = None,
    deliver: CodeDelivery | None = None,
) -> FastAPI:
    """Assemble and configure the FastAPI application instance.

    Collaborators left as None are built from `config` when the app starts, so
    tests can pass a store with a controllable clock or a capturing delivery hook.
    """

    config = config or default_settings
    configure_logging(config.LOG_LEVEL)

    if deliver is None:
        deliver = log_code_delivery if config.ENVIRONMENT == "development" else discard_code_delivery

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the shared store on startup; stop the sweeper and close the store on shutdown."""

        entry_store = store if store is not None else build_entry_store(config)
        app.state.settings = config
        app.state.entry_store = entry_store
        app.state.code_generator = generator or CodeGenerator(length=config.OTP_LENGTH)
        app.state.code_delivery = deliver

        sweep_task = None
        # Redis expires keys itself
        if config.OTP_STORE_BACKEND == "memory" and config.OTP_SWEEP_INTERVAL_SECONDS > 0:
            sweeper = ExpirySweeper(entry_store, config.OTP_SWEEP_INTERVAL_SECONDS)
            sweep_task = asyncio.create_task(sweeper.run())
        app.state.sweep_task = sweep_task
        logger.info("Verification cache ready (backend=%s)", config.OTP_STORE_BACKEND)

        yield

        if sweep_task is not None:
            sweep_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweep_task
        await entry_store.close()

    application = FastAPI(
        title=config.PROJECT_NAME,
        version=config.PROJECT_VERSION,
        lifespan=lifespan,
    )

    application.include_router(verification_router)

    @application.get("/")
    async def healthcheck():
        """Lightweight health endpoint used by uptime monitors."""
        return {"message": f"{config.PROJECT_NAME} is running!"}

    return application


app = create_application()
