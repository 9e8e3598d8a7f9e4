# src/pinstore/clients/factory.py
"""Storage backend selection.

The backend is chosen once at process start and injected into the RPC
servicer; nothing downstream branches on which one is in use.
"""

import structlog

from pinstore.clients.blockfrost import BlockfrostClient
from pinstore.clients.memory import InMemoryStorageClient
from pinstore.contracts.storage import StorageClient
from pinstore.core.config import ServiceSettings

logger = structlog.get_logger(__name__)


def create_storage_client(settings: ServiceSettings) -> StorageClient:
    """Build the storage client the settings call for.

    Blockfrost when a project credential is configured, in-memory otherwise.
    """
    if settings.blockfrost_project_id is None:
        logger.warning(
            "No Blockfrost project id configured, running in mock mode",
            expected_env="PINSTORE_BLOCKFROST_PROJECT_ID",
        )
        return InMemoryStorageClient(gateway_url=settings.gateway_url)

    logger.info("Using Blockfrost IPFS backend", base_url=settings.blockfrost_base_url)
    return BlockfrostClient(
        settings.blockfrost_project_id,
        base_url=settings.blockfrost_base_url,
        gateway_url=settings.gateway_url,
        timeout=settings.request_timeout_seconds,
    )
