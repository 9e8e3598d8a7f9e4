"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core,
clients or rpc. Settings live in pinstore.core.config.

Import patterns:
    from pinstore.contracts import CallContext, StorageClient, UploadResult
    from pinstore.contracts.messages import UploadContentRequest
"""

from pinstore.contracts.context import CallContext
from pinstore.contracts.errors import (
    BackendError,
    CallCancelledError,
    ContentNotFoundError,
    StorageError,
)
from pinstore.contracts.storage import StorageClient, UploadResult

__all__ = [
    "BackendError",
    "CallCancelledError",
    "CallContext",
    "ContentNotFoundError",
    "StorageClient",
    "StorageError",
    "UploadResult",
]
