# Licensed under the GPLv3 - see LICENSE
"""Encoders and decoders used for ASCII-art video containers.

Two independent codecs are provided:

- Variable-length quantities (VLQ), used to prefix each frame with the
  number of bytes it occupies.  Values are split in groups of 7 bits,
  least significant group first, with the high bit of every byte except
  the last set to indicate that more bytes follow.
- Run-length encoding (RLE), used to compress frame content.  Each run of
  identical bytes is stored as a ``(count, byte)`` pair, with runs longer
  than 255 split over multiple pairs.

All functions are pure, i.e., they do not depend on or change any state.
"""
import io
import operator

import numpy as np

from .utils import byte_array


__all__ = ['MalformedDataError', 'VLQ_MAX', 'RLE_MAX_COUNT',
           'encode_vlq', 'decode_vlq', 'encode_rle', 'decode_rle']


VLQ_MAX = (1 << 32) - 1
"""Largest value that can be stored as a frame length."""
RLE_MAX_COUNT = 255
"""Largest run that fits in a single ``(count, byte)`` pair."""


class MalformedDataError(ValueError):
    """Encoded data that cannot be decoded."""
    pass


def encode_vlq(value):
    """Encode an unsigned 32-bit integer as a variable-length quantity.

    Parameters
    ----------
    value : int
        Value to encode.  Must be in the range 0 to ``2**32 - 1``.

    Returns
    -------
    encoded : bytes
        Between 1 and 5 bytes, least significant 7-bit group first.
    """
    value = operator.index(value)
    if not 0 <= value <= VLQ_MAX:
        raise ValueError("{0} cannot be represented as an unsigned 32-bit "
                         "integer".format(value))

    encoded = bytearray()
    while value > 0x7f:
        encoded.append((value & 0x7f) | 0x80)
        value >>= 7
    encoded.append(value)
    return bytes(encoded)


def decode_vlq(source):
    """Decode a variable-length quantity.

    Parameters
    ----------
    source : filehandle or bytes-like
        Where to read the encoded value from.  For a filehandle, bytes are
        read one at a time, so that it is left positioned just after the
        last byte of the quantity.

    Returns
    -------
    value : int
        The decoded value, as an unsigned 32-bit integer (any higher bits
        in overlong input are dropped).
    nbytes : int
        Number of bytes consumed.

    Raises
    ------
    EOFError
        If the source ended before a byte with the high bit clear was found.
    """
    if not hasattr(source, 'read'):
        source = io.BytesIO(bytes(source))

    value = 0
    shift = 0
    nbytes = 0
    while True:
        b = source.read(1)
        if len(b) == 0:
            if nbytes == 0:
                raise EOFError("no data left to decode a length from.")
            raise EOFError("data ended within a length after {0} bytes."
                           .format(nbytes))
        nbytes += 1
        byte = b[0]
        # Accumulate as an unsigned 32-bit integer; higher bits are dropped.
        value = (value | (byte & 0x7f) << shift) & VLQ_MAX
        if not byte & 0x80:
            return value, nbytes
        shift += 7


def encode_rle(data):
    """Run-length encode data.

    Parameters
    ----------
    data : bytes-like or `~numpy.ndarray`
        Data to encode.  Interpreted as a sequence of bytes.

    Returns
    -------
    encoded : bytes
        Pairs of ``(count, byte)``, with ``count`` between 1 and 255.
        Runs longer than 255 bytes are split, with all but the last
        pair for a run holding the maximum count.
    """
    words = byte_array(data)
    if len(words) == 0:
        return b''

    # Locate the start of all runs of identical bytes.
    starts = np.flatnonzero(words[1:] != words[:-1]) + 1
    starts = np.concatenate(([0], starts))
    lengths = np.diff(np.concatenate((starts, [len(words)])))
    values = words[starts]
    # Split long runs over multiple pairs.
    nfull, remainder = np.divmod(lengths, RLE_MAX_COUNT)
    npairs = nfull + (remainder > 0)
    counts = np.full(npairs.sum(), RLE_MAX_COUNT, dtype=np.uint8)
    partial = remainder > 0
    counts[(np.cumsum(npairs) - 1)[partial]] = remainder[partial]

    encoded = np.empty((len(counts), 2), dtype=np.uint8)
    encoded[:, 0] = counts
    encoded[:, 1] = np.repeat(values, npairs)
    return encoded.tobytes()


def decode_rle(data):
    """Decode run-length encoded data.

    Parameters
    ----------
    data : bytes-like or `~numpy.ndarray`
        Sequence of ``(count, byte)`` pairs.

    Returns
    -------
    decoded : bytes
        Each byte repeated ``count`` times, in order.

    Raises
    ------
    MalformedDataError
        If the data do not consist of complete pairs.
    """
    words = byte_array(data)
    if len(words) % 2:
        raise MalformedDataError("run-length encoded data should consist of "
                                 "(count, byte) pairs, but has odd length {0}"
                                 .format(len(words)))

    pairs = words.reshape(-1, 2)
    return np.repeat(pairs[:, 1], pairs[:, 0]).tobytes()
