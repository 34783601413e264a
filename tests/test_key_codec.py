"""
Tests for timestamp key encodings.
"""

import pytest

from tsdb.models.exceptions import CorruptKeyError, InvalidArgumentError
from tsdb.models.key_codec import (
    INT64_MAX,
    INT64_MIN,
    KeyEncoding,
    OrderPreservingKeyCodec,
    TimeKeyCodec,
    codec_for,
)


class TestTimeKeyCodec:
    """Tests for the default (unsigned reinterpretation) layout."""

    def test_big_endian_layout(self):
        codec = TimeKeyCodec()
        assert codec.encode(1) == b"\x00\x00\x00\x00\x00\x00\x00\x01"
        assert codec.encode(0x0102030405060708) == bytes(range(1, 9))

    def test_negative_is_twos_complement(self):
        codec = TimeKeyCodec()
        assert codec.encode(-1) == b"\xff" * 8
        assert codec.decode(b"\xff" * 8) == -1

    def test_decode_inverts_encode(self):
        codec = TimeKeyCodec()
        for ts in (0, 1, 1_230_768_000_000_000_000, INT64_MAX, INT64_MIN, -42):
            assert codec.decode(codec.encode(ts)) == ts

    def test_byte_order_matches_non_negative_order(self):
        codec = TimeKeyCodec()
        times = [0, 1, 255, 256, 10**9, 10**18, INT64_MAX]
        assert sorted(times, key=codec.encode) == times

    def test_negative_keys_sort_after_non_negative(self):
        codec = TimeKeyCodec()
        assert codec.encode(-1) > codec.encode(INT64_MAX)
        assert codec.encode(-2) < codec.encode(-1)

    def test_out_of_range_rejected(self):
        codec = TimeKeyCodec()
        with pytest.raises(InvalidArgumentError):
            codec.encode(INT64_MAX + 1)
        with pytest.raises(InvalidArgumentError):
            codec.encode(INT64_MIN - 1)

    def test_non_int_rejected(self):
        codec = TimeKeyCodec()
        with pytest.raises(InvalidArgumentError):
            codec.encode(1.5)
        with pytest.raises(InvalidArgumentError):
            codec.encode(True)

    def test_short_key_is_corrupt(self):
        with pytest.raises(CorruptKeyError):
            TimeKeyCodec().decode(b"\x00\x01")


class TestOrderPreservingKeyCodec:
    """Tests for the sign-flipped layout."""

    def test_byte_order_matches_signed_order(self):
        codec = OrderPreservingKeyCodec()
        times = [INT64_MIN, -10**18, -1, 0, 1, 10**18, INT64_MAX]
        assert sorted(times, key=codec.encode) == times

    def test_decode_inverts_encode(self):
        codec = OrderPreservingKeyCodec()
        for ts in (INT64_MIN, -1, 0, 1, INT64_MAX):
            assert codec.decode(codec.encode(ts)) == ts

    def test_zero_has_sign_bit_set(self):
        assert OrderPreservingKeyCodec().encode(0) == b"\x80" + b"\x00" * 7


class TestCodecFor:
    def test_selects_codec(self):
        assert type(codec_for(KeyEncoding.UNSIGNED)) is TimeKeyCodec
        assert type(codec_for("order_preserving")) is OrderPreservingKeyCodec

    def test_unknown_encoding(self):
        with pytest.raises(InvalidArgumentError):
            codec_for("zigzag")
