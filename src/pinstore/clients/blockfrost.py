# src/pinstore/clients/blockfrost.py
"""Blockfrost IPFS storage client.

Talks to the Blockfrost IPFS API over httpx:
- upload: multipart POST to {base_url}/ipfs/add
- fetch:  GET {gateway_url}/{cid}
- pin:    POST {base_url}/ipfs/pin/add/{cid}
- unpin:  POST {base_url}/ipfs/pin/remove/{cid}

Every call is a single attempt. Failures surface as BackendError chained to
the underlying httpx exception; retry policy belongs to callers.
"""

from __future__ import annotations

import re
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from types import TracebackType
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from pinstore.contracts.context import CallContext
from pinstore.contracts.errors import BackendError, CallCancelledError, ContentNotFoundError
from pinstore.contracts.storage import UploadResult

logger = structlog.get_logger(__name__)

# Error bodies are kept for diagnostics, not archived
_MAX_ERROR_BODY_CHARS = 1024

# Decimal integer as Blockfrost encodes it: optional sign, ASCII digits, no padding
_SIZE_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# Sends run on these threads so a cancelled caller can stop waiting for headers
_SEND_WORKERS = 32


class AddResponse(BaseModel):
    """Body of a successful /ipfs/add call.

    Blockfrost documents ``size`` as a string-encoded integer; numbers are
    tolerated as well.
    """

    model_config = {"frozen": True}

    name: str | None = None
    ipfs_hash: str
    size: str | int | None = None


def _parse_size(raw: str | int | None) -> int:
    """Parse the advisory size field, degrading to 0 on garbage.

    Accepts what a strict base-10 int64 parser accepts; surrounding whitespace,
    digit separators, non-ASCII digits and out-of-range values all yield 0.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and _SIZE_PATTERN.fullmatch(raw):
        value = int(raw)
    else:
        logger.debug("blockfrost_size_unparseable", size=raw)
        return 0
    if not _INT64_MIN <= value <= _INT64_MAX:
        logger.debug("blockfrost_size_out_of_range", size=raw)
        return 0
    return value


def _error_body(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")[:_MAX_ERROR_BODY_CHARS]


def _discard_abandoned(future: Future[httpx.Response]) -> None:
    """Close a response nobody is waiting for any more."""
    if future.cancelled() or future.exception() is not None:
        return
    future.result().close()


class BlockfrostClient:
    """StorageClient backed by the Blockfrost IPFS API.

    Holds configuration, one shared httpx.Client (safe for concurrent use
    from the RPC worker threads) and a small pool that runs the sends.

    Example:
        with BlockfrostClient(project_id="ipfs...") as client:
            result = client.upload(CallContext(timeout=30), b"hello", "greeting.txt")
            print(client.gateway_url(result.cid))
    """

    def __init__(
        self,
        project_id: str,
        *,
        base_url: str = "https://ipfs.blockfrost.io/api/v0",
        gateway_url: str = "https://ipfs.blockfrost.dev/ipfs",
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize Blockfrost client.

        Args:
            project_id: Blockfrost IPFS project credential (sent as ``project_id`` header)
            base_url: API base URL
            gateway_url: Public gateway base used for fetch and gateway_url()
            timeout: Upper bound in seconds on any single HTTP call
            http_client: Optional pre-built client; the caller keeps ownership of it
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._project_id = project_id
        self._base_url = base_url.rstrip("/")
        self._gateway_url = gateway_url.rstrip("/")
        self._timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client(timeout=timeout)
        self._senders = ThreadPoolExecutor(max_workers=_SEND_WORKERS, thread_name_prefix="blockfrost-send")

    def __enter__(self) -> BlockfrostClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._senders.shutdown(wait=False, cancel_futures=True)
        if self._owns_client:
            self._client.close()

    def _auth_headers(self) -> dict[str, str]:
        return {"project_id": self._project_id}

    def _timeout_for(self, ctx: CallContext) -> float:
        remaining = ctx.time_remaining()
        if remaining is None:
            return self._timeout
        return min(self._timeout, remaining)

    def _send(self, ctx: CallContext, operation: str, cid: str | None, request: httpx.Request) -> httpx.Response:
        """Wait for response headers, or until ctx is cancelled or expires."""
        future = self._senders.submit(self._client.send, request, stream=True)
        wake = threading.Event()
        future.add_done_callback(lambda _: wake.set())
        ctx.add_callback(wake.set)

        try:
            while not future.done():
                ctx.check(operation, cid=cid)
                wake.wait(ctx.time_remaining())
        except CallCancelledError:
            if not future.cancel():
                future.add_done_callback(_discard_abandoned)
            logger.debug("blockfrost_send_abandoned", operation=operation, cid=cid)
            raise
        return future.result()

    def _execute(
        self,
        ctx: CallContext,
        operation: str,
        method: str,
        url: str,
        *,
        cid: str | None = None,
        headers: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
    ) -> tuple[int, bytes]:
        """Send one request and read the full body, honoring the call context.

        The request is sent on a worker thread. Cancellation or deadline expiry
        while waiting for response headers abandons the send (its response is
        closed when it arrives); between body chunks it aborts the read and
        closes the connection. A call cancelled at any point never returns
        a result.

        Returns:
            (status_code, body)

        Raises:
            CallCancelledError: If ctx is cancelled or past its deadline
            BackendError: On any transport failure
        """
        ctx.check(operation, cid=cid)
        request = self._client.build_request(
            method,
            url,
            headers=headers,
            files=files,
            timeout=self._timeout_for(ctx),
        )
        try:
            response = self._send(ctx, operation, cid, request)
        except httpx.TimeoutException as e:
            raise BackendError(f"IPFS {operation} timed out: {e}", operation=operation, cid=cid) from e
        except httpx.HTTPError as e:
            raise BackendError(f"IPFS {operation} request failed: {e}", operation=operation, cid=cid) from e

        try:
            chunks: list[bytes] = []
            for chunk in response.iter_bytes():
                ctx.check(operation, cid=cid)
                chunks.append(chunk)
        except httpx.HTTPError as e:
            raise BackendError(f"IPFS {operation} response read failed: {e}", operation=operation, cid=cid) from e
        finally:
            response.close()

        ctx.check(operation, cid=cid)
        return response.status_code, b"".join(chunks)

    def upload(self, ctx: CallContext, data: bytes, filename: str) -> UploadResult:
        status, body = self._execute(
            ctx,
            "upload",
            "POST",
            f"{self._base_url}/ipfs/add",
            headers=self._auth_headers(),
            files={"file": (filename, data, "application/octet-stream")},
        )
        if status != httpx.codes.OK:
            raise BackendError(
                f"IPFS upload failed with status {status}: {_error_body(body)}",
                operation="upload",
                status_code=status,
                body=_error_body(body),
            )

        try:
            added = AddResponse.model_validate_json(body)
        except ValidationError as e:
            raise BackendError(
                f"IPFS upload returned a malformed response: {e}",
                operation="upload",
                status_code=status,
                body=_error_body(body),
            ) from e
        if not added.ipfs_hash:
            raise BackendError(
                "IPFS upload response carried no ipfs_hash",
                operation="upload",
                status_code=status,
                body=_error_body(body),
            )

        size = _parse_size(added.size)
        logger.info("blockfrost_upload", cid=added.ipfs_hash, size=size, filename=filename)
        return UploadResult(cid=added.ipfs_hash, size=size, name=added.name or filename)

    def fetch(self, ctx: CallContext, cid: str) -> bytes:
        status, body = self._execute(ctx, "fetch", "GET", self.gateway_url(cid), cid=cid)
        if status == httpx.codes.NOT_FOUND:
            raise ContentNotFoundError(f"content not found on gateway: {cid}", operation="fetch", cid=cid)
        if status != httpx.codes.OK:
            raise BackendError(
                f"IPFS get failed with status {status}",
                operation="fetch",
                cid=cid,
                status_code=status,
                body=_error_body(body),
            )
        logger.debug("blockfrost_fetch", cid=cid, size=len(body))
        return body

    def pin(self, ctx: CallContext, cid: str) -> None:
        status, body = self._execute(
            ctx,
            "pin",
            "POST",
            f"{self._base_url}/ipfs/pin/add/{quote(cid, safe='')}",
            cid=cid,
            headers=self._auth_headers(),
        )
        if status != httpx.codes.OK:
            raise BackendError(
                f"IPFS pin failed with status {status}: {_error_body(body)}",
                operation="pin",
                cid=cid,
                status_code=status,
                body=_error_body(body),
            )
        logger.info("blockfrost_pin", cid=cid)

    def unpin(self, ctx: CallContext, cid: str) -> None:
        status, body = self._execute(
            ctx,
            "unpin",
            "POST",
            f"{self._base_url}/ipfs/pin/remove/{quote(cid, safe='')}",
            cid=cid,
            headers=self._auth_headers(),
        )
        if status == httpx.codes.NOT_FOUND:
            # Not pinned (or unknown): already in the requested state
            logger.debug("blockfrost_unpin_not_pinned", cid=cid)
            return
        if status != httpx.codes.OK:
            raise BackendError(
                f"IPFS unpin failed with status {status}: {_error_body(body)}",
                operation="unpin",
                cid=cid,
                status_code=status,
                body=_error_body(body),
            )
        logger.info("blockfrost_unpin", cid=cid)

    def gateway_url(self, cid: str) -> str:
        return f"{self._gateway_url}/{cid}"
