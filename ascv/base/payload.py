# Licensed under the GPLv3 - see LICENSE
"""
Base definitions for payloads.

Defines a payload class PayloadBase that can be used to hold the bytes
stored for a frame, providing access to the content encoded in it as a
numpy array.
"""
import numpy as np

from .utils import byte_array


__all__ = ['PayloadBase']


class PayloadBase:
    """Container for decoding and encoding frame payloads.

    Subclasses register the functions that turn stored bytes into content
    and back in the ``_decoders`` and ``_encoders`` dicts, keyed by the
    ``compression`` flag.

    Parameters
    ----------
    words : `~numpy.ndarray` or bytes-like
        The bytes that are stored in the file.  Anything other than an
        unsigned byte array is converted to one.
    compression : int
        How the content is encoded.  Default: 0, i.e., stored as is.
    """
    _dtype_word = np.dtype('u1')
    """Stored content is kept as unsigned bytes."""
    _encoders = {}
    _decoders = {}

    def __init__(self, words, *, compression=0):
        self.words = self._own(words)
        self.compression = int(compression)

    @classmethod
    def _own(cls, words):
        # Copy writeable buffers, so that later changes to the input
        # do not affect the payload.
        words = byte_array(words)
        if words.flags['WRITEABLE']:
            words = words.copy()
        return words

    @classmethod
    def fromfile(cls, fh, payload_nbytes, **kwargs):
        """Read payload from filehandle.

        Parameters
        ----------
        fh : filehandle
            From which data is read.
        payload_nbytes : int
            Number of bytes to read.

        Any other (keyword) arguments are passed on to the class initialiser.

        Raises
        ------
        EOFError
            If fewer than ``payload_nbytes`` bytes could be read.
        """
        if fh.seekable():
            # Do not try to read (and allocate) more than is present.
            offset = fh.tell()
            available = fh.seek(0, 2) - offset
            fh.seek(offset)
            nbytes = min(payload_nbytes, max(available, 0))
        else:
            nbytes = payload_nbytes
        s = fh.read(nbytes)
        if len(s) < payload_nbytes:
            raise EOFError("could not read full payload: expected {0} bytes "
                           "but got {1}.".format(payload_nbytes, len(s)))
        return cls(np.frombuffer(s, dtype=cls._dtype_word), **kwargs)

    def tofile(self, fh):
        """Write payload to filehandle."""
        return fh.write(self.words.tobytes())

    @classmethod
    def fromdata(cls, data, compression=0, **kwargs):
        """Encode data as a payload.

        Parameters
        ----------
        data : bytes-like or `~numpy.ndarray`
            Content to be encoded.  Interpreted as a sequence of bytes.
        compression : int, optional
            How to encode the content.  Default: 0, i.e., store as is.
        **kwargs
            Any other arguments to pass on to the class initializer.
        """
        self = cls(b'', compression=compression, **kwargs)
        self.words = self._own(self._encode(data))
        return self

    def _get_coder(self, coders):
        try:
            return coders[self.compression]
        except KeyError:
            raise ValueError(f"{self.__class__.__name__} has no coder for "
                             f"compression={self.compression}") from None

    def _encode(self, data):
        return self._get_coder(self._encoders)(data)

    def _decode(self, words):
        return self._get_coder(self._decoders)(words)

    @property
    def nbytes(self):
        """Size of the payload in bytes."""
        return self.words.nbytes

    def __len__(self):
        """Number of bytes stored in the payload."""
        return self.words.nbytes

    @property
    def content(self):
        """The bytes as stored, i.e., possibly still compressed."""
        return self.words.tobytes()

    @property
    def data(self):
        """Full decoded payload, as an array of unsigned bytes."""
        return byte_array(self._decode(self.words))

    def __array__(self, dtype=None, copy=None):
        """Interface to arrays."""
        if dtype is None or dtype == self._dtype_word:
            return self.data
        else:
            return self.data.astype(dtype)

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.compression == other.compression
                and (self.words is other.words
                     or np.array_equal(self.words, other.words)))

    def __ne__(self, other):
        return not self.__eq__(other)
