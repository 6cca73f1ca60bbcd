"""
Base64url codec for 64-bit unsigned values.

Values are serialized as 8 big-endian bytes, so every value encodes to
11 characters (12 with padding).
"""

import base64
import binascii
import re

from core.errors import InvalidEncodingError, NegativeInputError, ValueOverflowError

MASK_64 = (1 << 64) - 1
VALUE_BYTES = 8
ENCODED_LENGTH = 11
PADDED_LENGTH = 12

_BASE64_RE = re.compile(r"[A-Za-z0-9+/]*")


def escape_url(text):
    """Turn standard base64 into unpadded base64url."""
    return text.replace("+", "-").replace("/", "_").rstrip("=")


def unescape_url(text):
    """Turn base64url (padded or not) back into padded standard base64."""
    text = text.replace("-", "+").replace("_", "/").rstrip("=")
    return text + "=" * (-len(text) % 4)


def _check_value(value):
    if value < 0:
        raise NegativeInputError(f"cannot encode negative value {value}", value=value)
    if value > MASK_64:
        raise ValueOverflowError(f"value {value} does not fit in 64 bits", value=value)


def encode(value, padded=False):
    """Encode a u64 as fixed-width base64url text."""
    _check_value(value)
    raw = base64.b64encode(value.to_bytes(VALUE_BYTES, byteorder="big")).decode("ascii")
    if padded:
        return raw.replace("+", "-").replace("/", "_")
    return escape_url(raw)


def encode_compact(value):
    """Legacy variable-length encoding: shortest big-endian bytes, no padding.

    Old identifiers were written this way. They decode with decode() but
    do not sort lexicographically, so new ids always use encode().
    """
    _check_value(value)
    length = max(1, (value.bit_length() + 7) // 8)
    raw = base64.b64encode(value.to_bytes(length, byteorder="big")).decode("ascii")
    return escape_url(raw)


def decode(text):
    """Decode base64url (or base64) text into an unsigned int."""
    stripped = text.rstrip("=")
    if not stripped:
        raise InvalidEncodingError("empty identifier text", text=text)

    # Accept both alphabets, mixed.
    normalized = stripped.replace("-", "+").replace("_", "/")
    if not _BASE64_RE.fullmatch(normalized):
        raise InvalidEncodingError(f"invalid base64url text: {text!r}", text=text)

    try:
        data = base64.b64decode(unescape_url(normalized), validate=True)
    except binascii.Error as exc:
        raise InvalidEncodingError(f"invalid base64url text: {text!r}", text=text, cause=exc) from exc

    # The last character may carry bits past the final byte; they must be zero.
    if escape_url(base64.b64encode(data).decode("ascii")) != escape_url(normalized):
        raise InvalidEncodingError(f"non-canonical base64url text: {text!r}", text=text)
    return int.from_bytes(data, byteorder="big")
