# Licensed under the GPLv3 - see LICENSE
import io

import pytest
import numpy as np
from numpy.testing import assert_array_equal

from ..encoding import (encode_vlq, decode_vlq, encode_rle, decode_rle,
                        MalformedDataError, VLQ_MAX, RLE_MAX_COUNT)


class TestVLQ:
    @pytest.mark.parametrize('value, nbytes', [
        (0, 1), (1, 1), (127, 1), (128, 2), (16383, 2), (16384, 3),
        (2**21-1, 3), (2**32-1, 5)])
    def test_round_trip(self, value, nbytes):
        encoded = encode_vlq(value)
        assert len(encoded) == nbytes
        assert decode_vlq(encoded) == (value, nbytes)

    @pytest.mark.parametrize('value, encoded', [
        (0, b'\x00'),
        (5, b'\x05'),
        (128, b'\x80\x01'),
        (300, b'\xac\x02'),
        (2**32-1, b'\xff\xff\xff\xff\x0f')])
    def test_known_values(self, value, encoded):
        assert encode_vlq(value) == encoded
        assert decode_vlq(encoded)[0] == value

    def test_continuation_bits(self):
        encoded = encode_vlq(VLQ_MAX)
        assert all(b & 0x80 for b in encoded[:-1])
        assert not encoded[-1] & 0x80

    def test_numpy_integer(self):
        assert encode_vlq(np.uint32(300)) == b'\xac\x02'

    @pytest.mark.parametrize('value', [-1, 2**32])
    def test_out_of_range(self, value):
        with pytest.raises(ValueError, match='unsigned 32-bit'):
            encode_vlq(value)

    def test_not_integer(self):
        with pytest.raises(TypeError):
            encode_vlq(1.5)

    def test_decode_ignores_trailing_bytes(self):
        assert decode_vlq(b'\x05\x99\x99') == (5, 1)

    def test_decode_from_filehandle(self):
        fh = io.BytesIO(b'\xac\x02abc')
        assert decode_vlq(fh) == (300, 2)
        assert fh.tell() == 2
        assert fh.read() == b'abc'

    def test_decode_empty(self):
        with pytest.raises(EOFError, match='no data left'):
            decode_vlq(b'')

    @pytest.mark.parametrize('encoded, value', [
        (b'\xff' * 5 + b'\x01', VLQ_MAX),
        (b'\xff' * 9 + b'\x7f', VLQ_MAX),
        (b'\x80' * 9 + b'\x01', 0),
        (b'\x81\x80\x80\x80\x10', 1)])
    def test_decode_overlong(self, encoded, value):
        # Only the lowest 32 bits are kept.
        assert decode_vlq(encoded) == (value, len(encoded))

    def test_decode_truncated(self):
        fh = io.BytesIO(b'\xff\xff')
        with pytest.raises(EOFError, match='after 2 bytes'):
            decode_vlq(fh)


class TestRLE:
    @pytest.mark.parametrize('data, encoded', [
        (b'', b''),
        (b'A', b'\x01A'),
        (b'AAAB', b'\x03A\x01B'),
        (b'ABAB', b'\x01A\x01B\x01A\x01B'),
        (b'  ##', b'\x02 \x02#')])
    def test_known_values(self, data, encoded):
        assert encode_rle(data) == encoded
        assert decode_rle(encoded) == data

    def test_long_run_split(self):
        data = b'a' * 300
        encoded = encode_rle(data)
        assert encoded == b'\xffa' + bytes([300 - RLE_MAX_COUNT]) + b'a'
        assert decode_rle(encoded) == data

    def test_exact_multiple(self):
        encoded = encode_rle(b'x' * 510 + b'y')
        assert encoded == b'\xffx\xffx\x01y'

    def test_array_input(self):
        data = np.array([1, 1, 1, 7, 7], dtype='u1')
        encoded = encode_rle(data)
        assert encoded == b'\x03\x01\x02\x07'
        assert_array_equal(np.frombuffer(decode_rle(encoded), 'u1'), data)

    def test_round_trip_random(self):
        rng = np.random.default_rng(12345)
        # Few different values, so that there are runs of various lengths.
        data = np.repeat(rng.integers(0, 3, 200, dtype='u1'),
                         rng.integers(1, 600, 200))
        encoded = encode_rle(data)
        counts = np.frombuffer(encoded, 'u1')[::2]
        assert np.all(counts >= 1)
        assert decode_rle(encoded) == data.tobytes()

    def test_decode_zero_count(self):
        assert decode_rle(b'\x00A\x02B') == b'BB'

    def test_decode_odd_length(self):
        with pytest.raises(MalformedDataError, match='odd length 3'):
            decode_rle(b'\x02A\x03')
        # Also a ValueError.
        with pytest.raises(ValueError):
            decode_rle(b'\x02')

    def test_str_input(self):
        with pytest.raises(TypeError, match='encode it first'):
            encode_rle('AAA')
