"""Tests for contracts package.

Covers CallContext deadline and cancellation semantics. Storage client
behavior against the StorageClient protocol is tested under tests/clients/.
"""
