# Licensed under the GPLv3 - see LICENSE
"""
Definitions for the AAVF container header.

The header is a fixed 32-byte record at the start of the file, holding the
magic tag, format version, frame dimensions, playback rate, number of
frames, compression flag and character set identifier, followed by 16
reserved bytes.  All multi-byte integers are little-endian, and there is no
padding between fields.
"""
import numpy as np
from astropy import units as u

from ..base.header import DTypeHeaderBase
from ..base.utils import fixedvalue


__all__ = ['MAGIC', 'COMPRESSION_NONE', 'COMPRESSION_RLE',
           'InvalidFormatError', 'AAVFHeader']


MAGIC = b'AAVF'
"""Tag with which every AAVF file starts."""
COMPRESSION_NONE = 0
"""Compression flag for frames stored as is."""
COMPRESSION_RLE = 1
"""Compression flag for run-length encoded frames."""


class InvalidFormatError(ValueError):
    """Data that are not in AAVF format."""
    pass


class AAVFHeader(DTypeHeaderBase):
    """AAVF container header.

    Parameters
    ----------
    words : `~numpy.ndarray` or None
        Zero-dimensional array with dtype ``AAVFHeader._dtype``.  If `None`,
        set to an all-zero record (and skip any verification).
    verify : bool, optional
        Whether to do basic verification of integrity, including that the
        magic tag is correct.  Default: `True`.

    Returns
    -------
    header : `AAVFHeader`

    Notes
    -----
    The ``frames`` key holds the number of frames declared by the writer.
    It is not checked against the number of frames actually in the file.
    Similarly, ``compression`` only records how the writer stored the
    frame content; the content itself is read and written verbatim.

    Examples
    --------
    >>> from ascv import aavf
    >>> header = aavf.AAVFHeader.fromvalues(width=80, height=24, fps=12,
    ...                                     frames=10, compressed=True)
    >>> header.frame_shape
    (24, 80)
    >>> header.nbytes
    32
    """

    _dtype = np.dtype([('magic', 'S4'),
                       ('version', 'u1'),
                       ('width', '<u2'),
                       ('height', '<u2'),
                       ('fps', 'u1'),
                       ('frames', '<u4'),
                       ('compression', 'u1'),
                       ('charset', 'u1'),
                       ('reserved', 'V16')])

    _defaults = {'magic': MAGIC, 'version': 1}

    _properties = ('frame_shape', 'frame_rate', 'compressed')
    """Properties accessible/usable in initialisation."""

    def verify(self):
        super().verify()
        if self['magic'] != MAGIC:
            raise InvalidFormatError("invalid magic {0!r}; AAVF files start "
                                     "with {1!r}".format(bytes(self['magic']),
                                                         MAGIC))

    @fixedvalue
    def nbytes(cls):
        """Size of the header in bytes."""
        return cls._dtype.itemsize

    @property
    def frame_shape(self):
        """Shape of a frame in characters, i.e., (height, width)."""
        return int(self['height']), int(self['width'])

    @frame_shape.setter
    def frame_shape(self, frame_shape):
        self['height'], self['width'] = frame_shape

    @property
    def compressed(self):
        """Whether frame content is run-length encoded."""
        return bool(self['compression'] == COMPRESSION_RLE)

    @compressed.setter
    def compressed(self, compressed):
        self['compression'] = (COMPRESSION_RLE if compressed
                               else COMPRESSION_NONE)

    @property
    def frame_rate(self):
        """Number of frames per second."""
        return int(self['fps']) * u.Hz

    @frame_rate.setter
    def frame_rate(self, frame_rate):
        self['fps'] = int(round(u.Quantity(frame_rate, u.Hz).value))

    @property
    def duration(self):
        """Play time of the declared number of frames.

        `None` if the frame rate is zero.
        """
        if self['fps'] == 0:
            return None
        return (int(self['frames']) / self.frame_rate).to(u.s)

    def _repr_value(self, key, value):
        if key == 'reserved':
            return value.tobytes().hex()
        return super()._repr_value(key, value)
