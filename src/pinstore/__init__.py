"""
pinstore: content-addressed storage over an IPFS pinning service.

Exposes upload, fetch, pin and unpin of content by CID through a gRPC
interface, backed by Blockfrost IPFS or by process memory in mock mode.
"""

__version__ = "0.1.0"
