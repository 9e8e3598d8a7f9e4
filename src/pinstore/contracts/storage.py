# src/pinstore/contracts/storage.py
"""StorageClient protocol for content-addressed storage backends.

This protocol defines the interface satisfied by:
- clients/blockfrost.py (BlockfrostClient, remote pinning service)
- clients/memory.py (InMemoryStorageClient, mock mode)

The RPC servicer depends only on this protocol; the concrete backend is
chosen once at startup by clients/factory.py and injected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from pinstore.contracts.context import CallContext


@dataclass(frozen=True, slots=True)
class UploadResult:
    """Outcome of a successful upload.

    Attributes:
        cid: Content identifier produced for the payload
        size: Byte size reported by the backend (0 when the backend reported garbage)
        name: Display name the backend recorded, if any
    """

    cid: str
    size: int
    name: str | None = None


@runtime_checkable
class StorageClient(Protocol):
    """Protocol for content-addressed storage backends.

    Implementations must be behaviorally substitutable: caller-visible
    differences are limited to latency, persistence, and the detail text
    of ContentNotFoundError.
    """

    def upload(self, ctx: CallContext, data: bytes, filename: str) -> UploadResult:
        """Store a payload and return its identifier.

        Empty payloads are accepted; non-empty is enforced by the RPC layer.

        Raises:
            StorageError: If the backend failed to store the payload
        """
        ...

    def fetch(self, ctx: CallContext, cid: str) -> bytes:
        """Return the exact bytes stored under ``cid``.

        Raises:
            ContentNotFoundError: If the CID is unknown to the backend
            StorageError: For any other backend failure
        """
        ...

    def pin(self, ctx: CallContext, cid: str) -> None:
        """Mark ``cid`` as retained."""
        ...

    def unpin(self, ctx: CallContext, cid: str) -> None:
        """Clear the retention mark. Must not fail for unknown or unpinned CIDs."""
        ...

    def gateway_url(self, cid: str) -> str:
        """Public URL for ``cid`` under the configured gateway. Pure, never fails."""
        ...

    def close(self) -> None:
        """Release transport resources."""
        ...
