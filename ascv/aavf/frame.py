# Licensed under the GPLv3 - see LICENSE
"""
Definitions for AAVF frames.

In an AAVF file, each frame is stored as the number of bytes of its content,
encoded as a variable-length quantity, followed by the content itself.
Frames do not carry an index or time stamp; their position in the file
determines their order.
"""
from ..base.encoding import encode_vlq, decode_vlq
from .header import COMPRESSION_NONE
from .payload import AAVFPayload


__all__ = ['AAVFFrame']


class AAVFFrame:
    """Representation of an AAVF frame, i.e., a length-prefixed payload.

    Parameters
    ----------
    payload : `~ascv.aavf.AAVFPayload`
        Wrapper around the stored content, providing mechanisms to decode it.
    verify : bool
        Whether to do basic verification of integrity.  Default: `True`.

    Notes
    -----
    The Frame can also be instantiated using class methods:

      fromfile : read length and content from a filehandle

      frombytes : wrap content that is already encoded

      fromdata : encode content, compressing it if requested

    Of course, one can also do the opposite:

      tofile : method to write length and content to filehandle

      content : property that yields the content as stored

      data : property that yields the decoded content
    """

    _payload_class = AAVFPayload

    def __init__(self, payload, verify=True):
        self.payload = payload
        if verify:
            self.verify()

    def verify(self):
        """Simple verification."""
        assert isinstance(self.payload, self._payload_class)
        assert self.payload.words.ndim == 1

    @classmethod
    def fromfile(cls, fh, payload_nbytes=None, *,
                 compression=COMPRESSION_NONE, verify=True):
        """Read a frame from a filehandle.

        Parameters
        ----------
        fh : filehandle
            Handle to read the frame from.
        payload_nbytes : int, optional
            Length of the content.  If not given, it is read from the file
            (i.e., one can pass it in if the length prefix was read already).
        compression : int, optional
            How the content was stored.  Default: 0, i.e., as is.
        verify : bool, optional
            Whether to do basic verification of integrity.  Default: `True`.

        Raises
        ------
        EOFError
            If the file ends before the length or the full content is read.
        """
        if payload_nbytes is None:
            payload_nbytes, _ = decode_vlq(fh)
        payload = cls._payload_class.fromfile(fh, payload_nbytes,
                                              compression=compression)
        return cls(payload, verify=verify)

    def tofile(self, fh):
        """Write length prefix and content to filehandle."""
        fh.write(encode_vlq(self.nbytes))
        self.payload.tofile(fh)

    @classmethod
    def frombytes(cls, content, compression=COMPRESSION_NONE, verify=True):
        """Create a frame from content as it is to be stored.

        Parameters
        ----------
        content : bytes-like or `~numpy.ndarray`
            Content, already encoded as appropriate for ``compression``.
        compression : int, optional
            How the content is encoded.  Default: 0, i.e., as is.
        verify : bool, optional
            Whether to do basic verification of integrity.  Default: `True`.
        """
        return cls(cls._payload_class(content, compression=compression),
                   verify=verify)

    @classmethod
    def fromdata(cls, data, header=None, *, compression=None, verify=True):
        """Construct frame from content, encoding it as needed.

        Parameters
        ----------
        data : bytes-like, str, or `~numpy.ndarray`
            Content to be encoded.  A `str` is encoded as ASCII.
        header : `~ascv.aavf.AAVFHeader`, optional
            If given, its ``compression`` flag determines how to encode.
        compression : int, optional
            How to encode, used if no ``header`` is given.  Default: 0,
            i.e., store as is.
        verify : bool, optional
            Whether to do basic verification of integrity.  Default: `True`.
        """
        if header is not None:
            compression = header['compression']
        elif compression is None:
            compression = COMPRESSION_NONE
        if isinstance(data, str):
            data = data.encode('ascii')
        payload = cls._payload_class.fromdata(data, compression=compression)
        return cls(payload, verify=verify)

    @property
    def compression(self):
        """How the content is stored."""
        return self.payload.compression

    @property
    def nbytes(self):
        """Size of the stored content in bytes."""
        return self.payload.nbytes

    @property
    def frame_nbytes(self):
        """Size of the frame in the file, including its length prefix."""
        return len(encode_vlq(self.nbytes)) + self.nbytes

    @property
    def content(self):
        """Content as stored in the file."""
        return self.payload.content

    @property
    def data(self):
        """Decoded content, as an array of unsigned bytes."""
        return self.payload.data

    def tostring(self, encoding='ascii'):
        """Decoded content as a string."""
        return self.payload.tostring(encoding)

    def __len__(self):
        """Number of bytes of stored content."""
        return self.nbytes

    def __array__(self, dtype=None, copy=None):
        """Interface to arrays."""
        return self.payload.__array__(dtype=dtype, copy=copy)

    # For tests, it is useful to define equality.
    def __eq__(self, other):
        return (type(self) is type(other)
                and self.payload == other.payload)

    def __repr__(self):
        return ("<{0} nbytes={1}, compression={2}>"
                .format(self.__class__.__name__, self.nbytes,
                        self.compression))
