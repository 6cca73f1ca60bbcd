"""
Small UID - sortable 64-bit identifier.

Layout (most significant first):
    44 bits: milliseconds since Unix epoch
    20 bits: random suffix
Text form is base64url of the 8 big-endian bytes, 11 chars unpadded.
"""

from datetime import datetime, timezone
from functools import total_ordering

from core.errors import LengthError, NegativeInputError, TimestampOverflowError
from internal.logging import get_logger
from smalluid import codec
from utils.entropy import next_u64
from utils.timestamp import now_millis

MASK_64 = codec.MASK_64
RANDOM_BITS = 20
TIMESTAMP_BITS = 64 - RANDOM_BITS
RANDOM_MASK = (1 << RANDOM_BITS) - 1
MAX_TIMESTAMP = (1 << TIMESTAMP_BITS) - 1


def truncate_random(random):
    """Fit an oversized random value into the 20-bit suffix.

    Values wider than 64 bits are masked to 64 bits first; anything wider
    than 20 bits then keeps its bits from position 44 upwards. Inputs of
    21 to 44 bits therefore collapse to 0.
    """
    width = random.bit_length()
    if width <= RANDOM_BITS:
        return random
    if width > 64:
        random &= MASK_64
    return random >> TIMESTAMP_BITS


def parse_text(text):
    """Decode identifier text into its 64-bit value."""
    length = len(text.rstrip("="))
    if length > codec.ENCODED_LENGTH:
        raise LengthError(f"identifier text too long: {length} > {codec.ENCODED_LENGTH}",
                          length=length, limit=codec.ENCODED_LENGTH)
    return codec.decode(text)


def _caller_random(random):
    if random >= 0 and random.bit_length() > RANDOM_BITS:
        get_logger().debug("random truncated", bits=random.bit_length(),
                           suffix=truncate_random(random))
    return random


def pack(timestamp, random):
    """Assemble the 64-bit value from timestamp and random parts."""
    if timestamp < 0:
        raise NegativeInputError(f"timestamp must be non-negative, got {timestamp}",
                                 field="timestamp", value=timestamp)
    if random < 0:
        raise NegativeInputError(f"random must be non-negative, got {random}",
                                 field="random", value=random)
    if timestamp > MAX_TIMESTAMP:
        raise TimestampOverflowError(f"timestamp {timestamp} exceeds {TIMESTAMP_BITS} bits",
                                     timestamp=timestamp)
    return ((timestamp << RANDOM_BITS) | truncate_random(random)) & MASK_64


def unpack(value):
    """Split a 64-bit value into (timestamp, random)."""
    return value >> RANDOM_BITS, value & RANDOM_MASK


@total_ordering
class SmallUid:
    """Immutable 64-bit identifier, ordered by value (and so by timestamp)."""

    __slots__ = ("_value",)

    def __init__(self, value=0):
        """Wrap a raw integer (masked to 64 bits) or parse identifier text."""
        if isinstance(value, str):
            value = parse_text(value)
        object.__setattr__(self, "_value", int(value) & MASK_64)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def generate(cls):
        """New id from the current time and fresh randomness."""
        return cls(pack(now_millis(), next_u64()))

    @classmethod
    def from_timestamp(cls, timestamp):
        return cls(pack(timestamp, next_u64()))

    @classmethod
    def from_random(cls, random):
        return cls(pack(now_millis(), _caller_random(random)))

    @classmethod
    def from_parts(cls, timestamp, random):
        return cls(pack(timestamp, _caller_random(random)))

    @classmethod
    def from_text(cls, text):
        """Parse text produced by `text`, `padded_text` or the legacy compact form."""
        return cls(parse_text(text))

    @property
    def value(self):
        return self._value

    @property
    def timestamp(self):
        """Milliseconds since Unix epoch."""
        return self._value >> RANDOM_BITS

    @property
    def random(self):
        return self._value & RANDOM_MASK

    @property
    def parts(self):
        return unpack(self._value)

    @property
    def text(self):
        """Canonical 11-character base64url form."""
        return codec.encode(self._value)

    @property
    def padded_text(self):
        return codec.encode(self._value, padded=True)

    @property
    def unpadded_text(self):
        return self.text.rstrip("=")

    @property
    def datetime(self):
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    def isoformat(self):
        return self.datetime.isoformat(timespec="milliseconds")

    def to_dict(self, padded=False):
        return {
            "uid": self.padded_text if padded else self.text,
            "padded": padded,
            "value": self._value,
            "timestamp": self.timestamp,
            "random": self.random,
            "issued_at": self.isoformat(),
        }

    def __int__(self):
        return self._value

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"SmallUid({self.text!r})"

    def __eq__(self, other):
        if not isinstance(other, SmallUid):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other):
        if not isinstance(other, SmallUid):
            return NotImplemented
        return self._value < other._value

    def __hash__(self):
        return hash(self._value)

    def __reduce__(self):
        return (type(self), (self._value,))
