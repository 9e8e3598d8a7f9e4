# tests/property/__init__.py
"""Property-based tests for pinstore.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of.

Test categories:
- core/: CID determinism, base58 leading-zero handling, multihash layout
- clients/: in-memory upload/fetch round trips and pin idempotence
"""
