# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Usage:
    from tests.property.conftest import payloads, nonempty_payloads

    @given(data=payloads)
    def test_roundtrip(data: bytes) -> None:
        ...
"""

from __future__ import annotations

from hypothesis import strategies as st

# Any payload, including empty (the storage contract accepts empty bytes)
payloads = st.binary(min_size=0, max_size=4096)

# Non-empty payloads (what the RPC layer lets through)
nonempty_payloads = st.binary(min_size=1, max_size=4096)

# Payloads starting with one or more zero bytes
zero_prefixed = st.tuples(st.integers(min_value=1, max_value=8), st.binary(max_size=64)).map(
    lambda t: b"\x00" * t[0] + t[1]
)

# Filenames a client might send
filenames = st.text(min_size=1, max_size=40).filter(lambda s: s.strip() != "")
