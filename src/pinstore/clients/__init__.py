"""Storage clients implementing the StorageClient protocol.

Example:
    from pinstore.clients import create_storage_client
    from pinstore.core.config import load_settings

    client = create_storage_client(load_settings())
"""

from pinstore.clients.blockfrost import BlockfrostClient
from pinstore.clients.factory import create_storage_client
from pinstore.clients.memory import InMemoryStorageClient

__all__ = [
    "BlockfrostClient",
    "InMemoryStorageClient",
    "create_storage_client",
]
