"""gRPC surface: servicer, server bootstrap and client stub."""

from pinstore.rpc.errors import RpcError
from pinstore.rpc.servicer import SERVICE_NAME, StorageServicer

__all__ = [
    "SERVICE_NAME",
    "RpcError",
    "StorageServicer",
]
