from smalluid.codec import decode, encode, encode_compact, escape_url, unescape_url
from smalluid.uid import MAX_TIMESTAMP, SmallUid, pack, unpack

__all__ = [
    "SmallUid",
    "MAX_TIMESTAMP",
    "pack",
    "unpack",
    "encode",
    "decode",
    "encode_compact",
    "escape_url",
    "unescape_url",
]
