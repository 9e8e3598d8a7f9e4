# tests/conftest.py
"""Shared test fixtures and helpers.

Fixtures:
- ctx: a background CallContext (no deadline, not cancelled)
- memory_client: a fresh InMemoryStorageClient
- SpyStorageClient: records every call and returns scripted results

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import os
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from pinstore.clients.memory import InMemoryStorageClient
from pinstore.contracts.context import CallContext
from pinstore.contracts.storage import UploadResult


class SpyStorageClient:
    """StorageClient double that records calls.

    Each operation returns a canned value, or raises the exception set in
    ``failures[<operation>]``.
    """

    def __init__(self, gateway: str = "https://gateway.test/ipfs") -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.failures: dict[str, Exception] = {}
        self.upload_result = UploadResult(cid="QmSpy", size=0, name=None)
        self.fetch_result = b""
        self._gateway = gateway

    def _record(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        if operation in self.failures:
            raise self.failures[operation]

    def upload(self, ctx: CallContext, data: bytes, filename: str) -> UploadResult:
        self._record("upload", data, filename)
        return self.upload_result

    def fetch(self, ctx: CallContext, cid: str) -> bytes:
        self._record("fetch", cid)
        return self.fetch_result

    def pin(self, ctx: CallContext, cid: str) -> None:
        self._record("pin", cid)

    def unpin(self, ctx: CallContext, cid: str) -> None:
        self._record("unpin", cid)

    def gateway_url(self, cid: str) -> str:
        self.calls.append(("gateway_url", (cid,)))
        return f"{self._gateway}/{cid}"

    def close(self) -> None:
        self.calls.append(("close", ()))


@pytest.fixture
def ctx() -> CallContext:
    return CallContext.background()


@pytest.fixture
def memory_client() -> InMemoryStorageClient:
    return InMemoryStorageClient(gateway_url="https://gateway.test/ipfs")


@pytest.fixture
def spy_client() -> SpyStorageClient:
    return SpyStorageClient()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
