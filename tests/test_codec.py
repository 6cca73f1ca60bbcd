"""Unit tests for the base64url codec."""

import random

import pytest
from core.errors import InvalidEncodingError, NegativeInputError, ValueOverflowError
from smalluid.codec import (
    ENCODED_LENGTH,
    MASK_64,
    PADDED_LENGTH,
    decode,
    encode,
    encode_compact,
    escape_url,
    unescape_url,
)


class TestEscape:
    """Tests for base64 <-> base64url substitution."""

    def test_escape_url(self):
        """'+' and '/' are substituted and padding dropped."""
        assert escape_url("PDw/Pz8+Pg==") == "PDw_Pz8-Pg"

    def test_unescape_url_restores_padding(self):
        """unescape_url brings back the standard alphabet and padding."""
        assert unescape_url("PDw_Pz8-Pg") == "PDw/Pz8+Pg=="

    def test_unescape_url_keeps_aligned_text(self):
        """Text already a multiple of 4 gets no padding."""
        assert unescape_url("AAAA") == "AAAA"


class TestEncode:
    """Tests for encode()."""

    def test_encode_zero(self):
        """Zero encodes to all 'A'."""
        assert encode(0) == "AAAAAAAAAAA"

    def test_encode_one(self):
        """Low bits land in the last character."""
        assert encode(1) == "AAAAAAAAAAE"

    def test_encode_max(self):
        """Max value uses the url-safe alphabet."""
        assert encode(MASK_64) == "__________8"
        assert encode(MASK_64, padded=True) == "__________8="

    def test_fixed_length(self):
        """Every value encodes to 11 chars, 12 padded."""
        for value in (0, 1, 1 << 20, 1 << 63, MASK_64):
            assert len(encode(value)) == ENCODED_LENGTH
            assert len(encode(value, padded=True)) == PADDED_LENGTH

    def test_encode_alphabet(self):
        """Output only contains base64url characters."""
        allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_")
        for _ in range(200):
            assert set(encode(random.getrandbits(64))) <= allowed

    def test_encode_negative(self):
        """Negative values are rejected."""
        with pytest.raises(NegativeInputError):
            encode(-1)

    def test_encode_too_wide(self):
        """Values wider than 64 bits are rejected."""
        with pytest.raises(ValueOverflowError):
            encode(1 << 64)


class TestDecode:
    """Tests for decode()."""

    def test_roundtrip_edges(self):
        """decode(encode(v)) == v on edge values."""
        for value in (0, 1, 1 << 20, (1 << 20) - 1, 1 << 63, MASK_64):
            assert decode(encode(value)) == value
            assert decode(encode(value, padded=True)) == value

    def test_roundtrip_random(self):
        """decode(encode(v)) == v on random values."""
        for _ in range(200):
            value = random.getrandbits(64)
            assert decode(encode(value)) == value

    def test_decode_padded_and_unpadded(self):
        """Trailing '=' is optional."""
        assert decode("AAAAAAAAAAE") == 1
        assert decode("AAAAAAAAAAE=") == 1

    def test_decode_standard_alphabet(self):
        """Standard base64 '+/' is accepted, even mixed with '-_'."""
        assert decode("//////////8=") == MASK_64
        assert decode("/////_____8") == MASK_64

    def test_decode_legacy_compact(self):
        """Short legacy encodings still decode."""
        assert encode_compact(1) == "AQ"
        assert encode_compact(0) == "AA"
        assert decode("AQ") == 1
        assert decode(encode_compact(MASK_64)) == MASK_64

    def test_decode_invalid_character(self):
        """Characters outside the alphabet fail."""
        with pytest.raises(InvalidEncodingError):
            decode("AAAA*AAAAAA")

    def test_decode_inner_padding(self):
        """'=' is only allowed at the end."""
        with pytest.raises(InvalidEncodingError):
            decode("AA=AAAAAAAA")

    def test_decode_trailing_newline(self):
        """Whitespace is not part of the alphabet."""
        with pytest.raises(InvalidEncodingError):
            decode("AAAAAAAAAAE\n")

    def test_decode_empty(self):
        """Empty text fails."""
        with pytest.raises(InvalidEncodingError):
            decode("")
        with pytest.raises(InvalidEncodingError):
            decode("==")

    def test_decode_non_canonical_tail(self):
        """Set bits past the last byte are rejected."""
        for text in ("AAAAAAAAAAF", "AAAAAAAAAAH", "AR"):
            with pytest.raises(InvalidEncodingError):
                decode(text)

    def test_decode_impossible_length(self):
        """A length base64 cannot produce fails."""
        with pytest.raises(InvalidEncodingError):
            decode("AAAAA")

    def test_invalid_encoding_context(self):
        """Error carries the offending text."""
        with pytest.raises(InvalidEncodingError) as exc_info:
            decode("no way!")
        assert exc_info.value.context["text"] == "no way!"
