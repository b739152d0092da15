"""Tests for application wiring driven by settings."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from otpcache.core.config import Settings
from otpcache.main import build_entry_store, create_application
from otpcache.services.redis_store import RedisEntryStore, create_redis_client
from otpcache.services.store import InMemoryEntryStore


@pytest.mark.anyio
async def test_redis_backend_builds_redis_store_with_timeouts():
    config = Settings(OTP_STORE_BACKEND="redis", REDIS_URL="redis://cache:6380/2", OTP_STORE_TIMEOUT_SECONDS=0.75)
    store = build_entry_store(config)
    try:
        assert isinstance(store, RedisEntryStore)
        assert store.timeout == 0.75
        connection_kwargs = store.redis.connection_pool.connection_kwargs
        assert connection_kwargs["socket_timeout"] == 0.75
        assert connection_kwargs["socket_connect_timeout"] == 0.75
        assert connection_kwargs["host"] == "cache"
        assert connection_kwargs["port"] == 6380
        assert connection_kwargs["db"] == 2
    finally:
        await store.close()


@pytest.mark.anyio
async def test_create_redis_client_decodes_responses():
    client = create_redis_client("redis://localhost:6379/0", 1.5)
    try:
        assert client.connection_pool.connection_kwargs["decode_responses"] is True
        assert client.connection_pool.connection_kwargs["socket_timeout"] == 1.5
    finally:
        await client.aclose()


def test_memory_backend_is_the_default():
    assert isinstance(build_entry_store(Settings()), InMemoryEntryStore)


def test_production_without_delivery_channel_rejects_and_drops_code(clock):
    store = InMemoryEntryStore(clock=clock)
    config = Settings(ENVIRONMENT="production", OTP_SWEEP_INTERVAL_SECONDS=0)
    with TestClient(create_application(config, store=store)) as client:
        response = client.post("/verification/registration/request", json={"email": "parent@school.edu"})
        assert response.status_code == 502
        assert len(store) == 0


def test_development_logs_code_instead_of_sending(clock, caplog):
    store = InMemoryEntryStore(clock=clock)
    config = Settings(ENVIRONMENT="development", OTP_SWEEP_INTERVAL_SECONDS=0)
    with caplog.at_level("INFO", logger="otpcache.services.delivery"):
        with TestClient(create_application(config, store=store)) as client:
            response = client.post("/verification/registration/request", json={"email": "parent@school.edu"})
            assert response.status_code == 202
            assert len(store) == 1

    assert any("[dev delivery]" in record.getMessage() for record in caplog.records)


def test_sweeper_runs_only_for_memory_backend(clock):
    store = InMemoryEntryStore(clock=clock)

    memory_app = create_application(Settings(OTP_SWEEP_INTERVAL_SECONDS=30), store=store)
    with TestClient(memory_app):
        assert memory_app.state.sweep_task is not None

    redis_app = create_application(
        Settings(OTP_STORE_BACKEND="redis", OTP_SWEEP_INTERVAL_SECONDS=30), store=InMemoryEntryStore(clock=clock)
    )
    with TestClient(redis_app):
        assert redis_app.state.sweep_task is None
