"""
Timestamp <-> key encodings.

Keys are 8 bytes, big-endian, so LMDB's lexicographic byte ordering
matches timestamp ordering.
"""

import struct
from enum import Enum

from tsdb.models.exceptions import CorruptKeyError, InvalidArgumentError

KEY_SIZE = 8

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_SIGN_BIT = 1 << 63

_SIGNED = struct.Struct(">q")
_UNSIGNED = struct.Struct(">Q")


class KeyEncoding(str, Enum):
    """On-disk key layout selected at open time."""

    UNSIGNED = "unsigned"  # two's complement bits
    ORDER_PRESERVING = "order_preserving"  # sign bit flipped


class TimeKeyCodec:
    """
    Default key codec: the timestamp's two's-complement bits written
    big-endian.

    Byte order equals numeric order among non-negative timestamps and
    among negative timestamps, but every non-negative key sorts before
    every negative one.
    """

    encoding = KeyEncoding.UNSIGNED

    def encode(self, ts: int) -> bytes:
        _check_range(ts)
        return _SIGNED.pack(ts)

    def decode(self, key: bytes) -> int:
        if len(key) != KEY_SIZE:
            raise CorruptKeyError(bytes(key))
        return _SIGNED.unpack(key)[0]


class OrderPreservingKeyCodec(TimeKeyCodec):
    """
    Sign-flipped codec: byte order equals signed numeric order across zero.

    Not compatible with files written by TimeKeyCodec.
    """

    encoding = KeyEncoding.ORDER_PRESERVING

    def encode(self, ts: int) -> bytes:
        _check_range(ts)
        return _UNSIGNED.pack(ts + _SIGN_BIT)

    def decode(self, key: bytes) -> int:
        if len(key) != KEY_SIZE:
            raise CorruptKeyError(bytes(key))
        return _UNSIGNED.unpack(key)[0] - _SIGN_BIT


def codec_for(encoding: KeyEncoding | str) -> TimeKeyCodec:
    """Return the codec for a key encoding name."""
    try:
        encoding = KeyEncoding(encoding)
    except ValueError:
        raise InvalidArgumentError(f"Unknown key encoding: {encoding!r}") from None

    if encoding is KeyEncoding.ORDER_PRESERVING:
        return OrderPreservingKeyCodec()
    return TimeKeyCodec()


def _check_range(ts: int) -> None:
    if isinstance(ts, bool) or not isinstance(ts, int):
        raise InvalidArgumentError(f"Timestamp must be an int, got {type(ts).__name__}")
    if not INT64_MIN <= ts <= INT64_MAX:
        raise InvalidArgumentError(f"Timestamp {ts} is outside the int64 range")
