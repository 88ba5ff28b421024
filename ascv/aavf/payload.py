# Licensed under the GPLv3 - see LICENSE
"""
Definitions for AAVF payloads.

Implements a AAVFPayload class used to store the content of a frame, and
decode it to, or encode it from, the actual characters.  Content is either
stored as is or run-length encoded, depending on the compression flag.
"""
from ..base.payload import PayloadBase
from ..base.encoding import encode_rle, decode_rle
from .header import COMPRESSION_NONE, COMPRESSION_RLE


__all__ = ['AAVFPayload']


def store_raw(data):
    return data


class AAVFPayload(PayloadBase):
    """Container for decoding and encoding AAVF payloads.

    Parameters
    ----------
    words : `~numpy.ndarray` or bytes-like
        The frame content as stored in the file.
    compression : int, optional
        Whether the content is stored as is (0; default) or run-length
        encoded (1).
    header : `~ascv.aavf.AAVFHeader`, optional
        If given, used to infer ``compression``.
    """
    _encoders = {COMPRESSION_NONE: store_raw,
                 COMPRESSION_RLE: encode_rle}
    _decoders = {COMPRESSION_NONE: store_raw,
                 COMPRESSION_RLE: decode_rle}

    def __init__(self, words, *, compression=COMPRESSION_NONE, header=None):
        if header is not None:
            compression = header['compression']
        super().__init__(words, compression=compression)

    @property
    def compressed(self):
        """Whether the content is run-length encoded."""
        return self.compression == COMPRESSION_RLE

    def tostring(self, encoding='ascii'):
        """Decoded content as a string.

        Parameters
        ----------
        encoding : str, optional
            How to interpret the bytes.  Default: 'ascii'.
        """
        return self.data.tobytes().decode(encoding)
