# src/pinstore/contracts/errors.py
"""Storage error hierarchy.

Every failure a storage client can report is a StorageError subclass.
The RPC layer maps each subclass to exactly one status code, so adapters
must raise the most specific class that applies and chain the underlying
cause with ``raise ... from exc``.
"""


class StorageError(Exception):
    """Base class for storage client failures.

    Attributes:
        operation: Storage operation that failed (e.g. "upload", "pin")
        cid: Content identifier involved, when there is one
    """

    def __init__(self, message: str, *, operation: str, cid: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.cid = cid


class ContentNotFoundError(StorageError):
    """Requested CID is absent from the backing store."""


class BackendError(StorageError):
    """Backing service failed: transport error, non-200 status, or malformed body.

    Attributes:
        status_code: HTTP status when the service answered, None for transport errors
        body: Response body text when the service answered with an error
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        cid: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation, cid=cid)
        self.status_code = status_code
        self.body = body


class CallCancelledError(StorageError):
    """Call context was cancelled, or its deadline passed, before the call finished."""
