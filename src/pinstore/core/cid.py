# src/pinstore/core/cid.py
"""
Content identifier (CIDv0) computation.

A CIDv0 is the base58btc encoding of a sha2-256 multihash:

    multihash = <hash-function code 0x12> <digest length 0x20> <32-byte digest>
    cid       = base58(multihash)

The result is IPFS-compatible for raw-block content addressing and starts
with "Qm" for every 34-byte sha2-256 multihash. Nothing here special-cases
that prefix; it falls out of the encoding.
"""

from __future__ import annotations

import hashlib

# Bitcoin/IPFS alphabet: no 0, O, I or l
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

# Multihash registry code for sha2-256 and its digest length
SHA2_256_CODE = 0x12
SHA2_256_LENGTH = 0x20


def encode_base58(data: bytes) -> str:
    """Encode bytes as base58 with leading-zero preservation.

    The input is read as a big-endian unsigned integer and repeatedly
    divided by 58. Leading zero bytes carry no numeric value, so each one
    is emitted separately as the alphabet's zero symbol ('1').

    Args:
        data: Bytes to encode (may be empty)

    Returns:
        Base58 string; empty for empty input
    """
    value = int.from_bytes(data, "big")
    digits: list[str] = []
    while value > 0:
        value, remainder = divmod(value, 58)
        digits.append(BASE58_ALPHABET[remainder])

    leading_zeros = 0
    for byte in data:
        if byte != 0:
            break
        leading_zeros += 1

    return BASE58_ALPHABET[0] * leading_zeros + "".join(reversed(digits))


def encode_multihash(digest: bytes, code: int = SHA2_256_CODE) -> bytes:
    """Build a multihash: function code byte, length byte, digest.

    Raises:
        ValueError: If code or digest length does not fit in a single byte
    """
    if not 0 <= code <= 0xFF:
        raise ValueError(f"Multihash function code must fit in one byte, got {code:#x}")
    if len(digest) > 0xFF:
        raise ValueError(f"Multihash digest must be at most 255 bytes, got {len(digest)}")
    return bytes((code, len(digest))) + digest


def compute_cid(data: bytes) -> str:
    """Compute the CIDv0 identifier for a payload.

    Deterministic and pure: identical bytes always produce the same CID.
    """
    digest = hashlib.sha256(data).digest()
    return encode_base58(encode_multihash(digest, SHA2_256_CODE))
