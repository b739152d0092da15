"""Shared pytest fixtures for the verification cache."""

from __future__ import annotations

import random
import sys
from pathlib import Path

import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from otpcache.services.codes import CodeGenerator  # noqa: E402
from otpcache.services.otp import VerificationCache  # noqa: E402
from otpcache.services.store import InMemoryEntryStore  # noqa: E402

TTL_SECONDS = 600


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def generator() -> CodeGenerator:
    return CodeGenerator(length=6, rng=random.Random(1234))


@pytest.fixture
def memory_store(clock: FakeClock) -> InMemoryEntryStore:
    return InMemoryEntryStore(clock=clock)


@pytest.fixture
def cache(memory_store: InMemoryEntryStore, generator: CodeGenerator) -> VerificationCache:
    return VerificationCache(memory_store, generator, ttl_seconds=TTL_SECONDS, purpose="registration")
