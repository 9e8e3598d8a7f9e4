# src/pinstore/clients/memory.py
"""In-memory storage client for development without Blockfrost credentials.

Computes real CIDv0 identifiers locally, so CIDs issued in mock mode match
what IPFS would assign to the same raw bytes. Nothing survives a process
restart.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from pinstore.contracts.context import CallContext
from pinstore.contracts.errors import ContentNotFoundError
from pinstore.contracts.storage import UploadResult
from pinstore.core.cid import compute_cid

logger = structlog.get_logger(__name__)

DEFAULT_GATEWAY_URL = "https://ipfs.io/ipfs"


class ReadWriteLock:
    """Shared/exclusive lock: many readers or one writer.

    Writer-preferring: once a writer is waiting, new readers queue behind
    it so a steady stream of fetches cannot starve uploads.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryStorageClient:
    """StorageClient backed by process memory.

    Storage (CID -> bytes) and the pin set are guarded by one ReadWriteLock.
    Critical sections are pure dict/set operations; no lock is held across
    blocking work. The call context is accepted for protocol conformance
    and otherwise ignored.

    Example:
        client = InMemoryStorageClient()
        result = client.upload(CallContext.background(), b"hello", "greeting.txt")
        client.fetch(CallContext.background(), result.cid)  # b"hello"
    """

    def __init__(self, gateway_url: str | None = None) -> None:
        self._gateway_url = (gateway_url or DEFAULT_GATEWAY_URL).rstrip("/")
        self._storage: dict[str, bytes] = {}
        self._pins: set[str] = set()
        self._lock = ReadWriteLock()
        logger.warning("IPFS storage running in mock mode; data is stored in memory only")

    def upload(self, ctx: CallContext, data: bytes, filename: str) -> UploadResult:
        # Never trust a caller-supplied identifier
        cid = compute_cid(data)
        payload = bytes(data)
        with self._lock.write():
            self._storage[cid] = payload
        logger.debug("mock_upload", cid=cid, size=len(payload), filename=filename)
        return UploadResult(cid=cid, size=len(payload), name=filename)

    def fetch(self, ctx: CallContext, cid: str) -> bytes:
        with self._lock.read():
            data = self._storage.get(cid)
        if data is None:
            logger.debug("mock_fetch_miss", cid=cid)
            raise ContentNotFoundError(
                f"content not found: {cid} (in-memory storage does not survive restarts; "
                "it was likely reset)",
                operation="fetch",
                cid=cid,
            )
        logger.debug("mock_fetch", cid=cid, size=len(data))
        return data

    def pin(self, ctx: CallContext, cid: str) -> None:
        with self._lock.write():
            self._pins.add(cid)
        logger.debug("mock_pin", cid=cid)

    def unpin(self, ctx: CallContext, cid: str) -> None:
        with self._lock.write():
            self._pins.discard(cid)
        logger.debug("mock_unpin", cid=cid)

    def gateway_url(self, cid: str) -> str:
        return f"{self._gateway_url}/{cid}"

    def close(self) -> None:
        """Nothing to release; storage is dropped with the instance."""

    def is_pinned(self, cid: str) -> bool:
        with self._lock.read():
            return cid in self._pins

    def stored_cids(self) -> list[str]:
        with self._lock.read():
            return list(self._storage)
