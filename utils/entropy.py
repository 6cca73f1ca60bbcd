"""Cryptographic random source for the uid suffix."""

import os


def next_u64():
    """Return 64 uniformly random bits as an unsigned int."""
    return int.from_bytes(os.urandom(8), byteorder="big")
