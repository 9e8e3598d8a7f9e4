# tests/core/test_cid.py
"""Tests for CIDv0 computation: multihash layout and base58 encoding."""

import hashlib

import pytest

from pinstore.core.cid import (
    BASE58_ALPHABET,
    SHA2_256_CODE,
    SHA2_256_LENGTH,
    compute_cid,
    encode_base58,
    encode_multihash,
)

# sha2-256 multihash of the empty payload, base58-encoded
EMPTY_CID = "QmdfTbBqBPQ7VNxZEYEj14VmRuZBkqFbiwReogJgS1zR1n"
EMPTY_SHA256_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestBase58:
    """encode_base58 against fixed vectors."""

    def test_alphabet_excludes_ambiguous_characters(self) -> None:
        assert len(BASE58_ALPHABET) == 58
        assert len(set(BASE58_ALPHABET)) == 58
        for ch in "0OIl":
            assert ch not in BASE58_ALPHABET

    def test_empty_input_encodes_to_empty_string(self) -> None:
        assert encode_base58(b"") == ""

    def test_known_vector(self) -> None:
        assert encode_base58(b"Hello World!") == "2NEpo7TZRRrLZSi2U"

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"\x00", "1"),
            (b"\x00\x00\x00", "111"),
            (b"\x00\x01", "12"),
            (b"\x00\x00\xff", "115Q"),
            (b"\x00\x01\x02\x03", "1Ldp"),
        ],
    )
    def test_leading_zero_bytes_become_ones(self, data: bytes, expected: str) -> None:
        assert encode_base58(data) == expected

    def test_zero_prefixed_digest_keeps_its_zero_symbol(self) -> None:
        """A digest-sized input starting with 0x00 must not lose the leading byte."""
        constructed = b"\x00" + hashlib.sha256(b"x").digest()

        encoded = encode_base58(constructed)

        assert encoded == "144PMwfFs4tfN4ujLy5xwpiGxQfa9abP5HFYtub8vgHXn"
        assert encoded.startswith("1")
        assert encoded[1:] == encode_base58(constructed[1:])

    def test_single_remainders_map_to_alphabet(self) -> None:
        assert encode_base58(bytes([57])) == "z"
        assert encode_base58(bytes([58])) == "21"


class TestMultihash:
    """encode_multihash layout."""

    def test_sha256_multihash_layout(self) -> None:
        digest = hashlib.sha256(b"abc").digest()

        multihash = encode_multihash(digest)

        assert len(multihash) == 34
        assert multihash[0] == SHA2_256_CODE == 0x12
        assert multihash[1] == SHA2_256_LENGTH == 0x20
        assert multihash[2:] == digest

    def test_length_byte_tracks_digest_length(self) -> None:
        assert encode_multihash(b"\xaa" * 20, code=0x11)[:2] == bytes([0x11, 20])

    def test_rejects_oversized_digest(self) -> None:
        with pytest.raises(ValueError, match="at most 255 bytes"):
            encode_multihash(b"\x00" * 256)

    @pytest.mark.parametrize("code", [-1, 0x100])
    def test_rejects_multibyte_code(self, code: int) -> None:
        with pytest.raises(ValueError, match="one byte"):
            encode_multihash(b"\x00" * 32, code=code)


class TestComputeCid:
    """compute_cid golden values and shape."""

    def test_empty_payload_golden_value(self) -> None:
        assert hashlib.sha256(b"").hexdigest() == EMPTY_SHA256_HEX
        assert compute_cid(b"") == EMPTY_CID

    def test_empty_digest_through_pipeline(self) -> None:
        multihash = encode_multihash(bytes.fromhex(EMPTY_SHA256_HEX))
        assert encode_base58(multihash) == EMPTY_CID

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"hello world", "QmaozNR7DZHQK1ZcU9p7QdrshMvXqWK6gpu5rmrkPdT3L4"),
            (b"abc", "QmatYkNGZnELf8cAGdyJpUca2PyY4szai3RHyyWofNY1pY"),
        ],
    )
    def test_known_payloads(self, data: bytes, expected: str) -> None:
        assert compute_cid(data) == expected

    def test_cidv0_shape(self) -> None:
        cid = compute_cid(b"some payload")
        assert cid.startswith("Qm")
        assert len(cid) == 46
        assert set(cid) <= set(BASE58_ALPHABET)

    def test_distinct_payloads_get_distinct_cids(self) -> None:
        payloads = [b"a", b"b", b"ab", b"ba", b"\x00", b"\x00\x00", b"hello world", b"hello world\n"]
        cids = {compute_cid(p) for p in payloads}
        assert len(cids) == len(payloads)

    def test_deterministic(self) -> None:
        assert compute_cid(b"repeat") == compute_cid(b"repeat")
