# Licensed under the GPLv3 - see LICENSE
import warnings

from astropy.utils import lazyproperty

from ..base.base import FileBase, FileOpener, FileInfo
from ..base.encoding import decode_vlq
from .header import AAVFHeader, COMPRESSION_NONE
from .frame import AAVFFrame
from .file_info import AAVFFileReaderInfo


__all__ = ['AAVFFileReader', 'AAVFFileWriter',
           'open', 'info', 'read', 'write']


class AAVFFileReader(FileBase):
    """Simple reader for AAVF files.

    Wraps a binary filehandle, providing methods to help interpret the data,
    such as `read_header`, `read_frame` and `read_frames`.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    """
    info = AAVFFileReaderInfo()

    def read_header(self):
        """Read the container header from the file.

        Returns
        -------
        header : `~ascv.aavf.AAVFHeader`

        Raises
        ------
        EOFError
            If the file is shorter than a header.
        ~ascv.aavf.InvalidFormatError
            If the file does not start with the AAVF magic tag.
        """
        return AAVFHeader.fromfile(self.fh_raw)

    @lazyproperty
    def header0(self):
        """Header at the start of the file."""
        with self.temporary_offset(0):
            return self.read_header()

    def read_frame(self, payload_nbytes=None, compression=None, verify=True):
        """Read a single frame (length prefix plus content).

        Parameters
        ----------
        payload_nbytes : int, optional
            Length of the content, if the length prefix was read already.
        compression : int, optional
            How the content is stored.  Default: as given in the header
            at the start of the file.
        verify : bool, optional
            Whether to do basic checks of frame integrity.  Default: `True`.

        Returns
        -------
        frame : `~ascv.aavf.AAVFFrame`
            With ``content`` and ``data`` properties that return the content
            as stored and as decoded, respectively.

        Raises
        ------
        EOFError
            If the file ends before the length or the full content is read.
        """
        if compression is None:
            compression = self.header0['compression']
        return AAVFFrame.fromfile(self.fh_raw, payload_nbytes,
                                  compression=compression, verify=verify)

    def read_frames(self, strict=False, verify=True):
        """Read all frames from the current position until the end of file.

        The file should be positioned at the start of a frame, e.g., just
        after reading the header.

        Parameters
        ----------
        strict : bool, optional
            Whether a length prefix that is cut off by the end of the file
            should raise an `EOFError`.  By default, such a partial prefix
            just ends the list of frames, with a warning.
        verify : bool, optional
            Whether to do basic checks of frame integrity.  Default: `True`.

        Returns
        -------
        frames : list of `~ascv.aavf.AAVFFrame`
            In the order in which they are stored.

        Raises
        ------
        EOFError
            If the file ends before the full content of a frame is read.
        """
        frames = []
        while True:
            offset = self.tell()
            try:
                payload_nbytes, _ = decode_vlq(self.fh_raw)
            except EOFError as exc:
                if self.tell() == offset:
                    break
                if strict:
                    raise
                warnings.warn(f"frame {len(frames)} at offset {offset}: "
                              f"{exc} Ignoring the remaining bytes.")
                break

            frames.append(self.read_frame(payload_nbytes, verify=verify))

        return frames

    def get_frame_rate(self):
        """Determine the number of frames per second.

        Simply the ``fps`` value from the header at the start of the file.

        Returns
        -------
        frame_rate : `~astropy.units.Quantity`
            Frames per second.
        """
        return self.header0.frame_rate


class AAVFFileWriter(FileBase):
    """Simple writer for AAVF files.

    Adds `write_header`, `write_frame`, and `write_frames` methods to the
    binary file wrapper.

    Parameters
    ----------
    fh_raw : filehandle
        Filehandle of the raw binary data file.
    header0 : `~ascv.aavf.AAVFHeader`, optional
        If given, written to the file immediately.
    """

    def __init__(self, fh_raw, header0=None):
        super().__init__(fh_raw)
        self.header0 = header0
        if header0 is not None:
            self.write_header(header0)

    def write_header(self, header=None, **kwargs):
        """Write the container header.

        Parameters
        ----------
        header : `~ascv.aavf.AAVFHeader`
            Can instead give keyword arguments to construct a header.
        **kwargs
            If ``header`` is not given, these are used to initialize one.
        """
        if header is None:
            header = AAVFHeader.fromvalues(**kwargs)
        self.header0 = header
        return header.tofile(self.fh_raw)

    def write_frame(self, data, compression=None):
        """Write a single frame (length prefix plus content).

        Parameters
        ----------
        data : bytes-like, `~numpy.ndarray`, or `~ascv.aavf.AAVFFrame`
            If not a frame, the content as it should be stored, i.e., it is
            written verbatim, without any encoding.
        compression : int, optional
            Used to construct the frame if ``data`` is not a frame.  Since
            the content is stored as given, this only affects the frame
            instance.  Default: as given in the header written.
        """
        if not isinstance(data, AAVFFrame):
            if compression is None:
                compression = (COMPRESSION_NONE if self.header0 is None
                               else self.header0['compression'])
            data = AAVFFrame.frombytes(data, compression=compression)
        return data.tofile(self.fh_raw)

    def write_frames(self, frames):
        """Write a sequence of frames, in order.

        Parameters
        ----------
        frames : iterable
            Of `~ascv.aavf.AAVFFrame` or bytes-like content (see
            `write_frame`).
        """
        for frame in frames:
            self.write_frame(frame)


open = FileOpener.create(globals(), doc="""
--- For writing : (see :class:`~ascv.aavf.base.AAVFFileWriter`)

header0 : `~ascv.aavf.AAVFHeader`
    Header to write at the start of the file.  Can instead pass on
    keyword arguments to construct one (see
    :meth:`~ascv.aavf.AAVFHeader.fromvalues`).

Returns
-------
Filehandle
    :class:`~ascv.aavf.base.AAVFFileReader` or
    :class:`~ascv.aavf.base.AAVFFileWriter` (binary), depending on ``mode``.
""")


info = FileInfo.create(globals())


def read(name, strict=False):
    """Read the header and all frames of an AAVF file.

    The frame content is not decoded; check the ``compression`` flag of the
    header, or use ``frame.data`` to get the decoded content.

    Parameters
    ----------
    name : str or filehandle
        File name or filehandle, positioned at the start of the header.
    strict : bool, optional
        Whether a length prefix that is cut off by the end of the file
        should raise an `EOFError`.  By default, such a partial prefix just
        ends the list of frames, with a warning.

    Returns
    -------
    header : `~ascv.aavf.AAVFHeader`
    frames : list of `~ascv.aavf.AAVFFrame`

    Raises
    ------
    ~ascv.aavf.InvalidFormatError
        If the file does not start with the AAVF magic tag.
    EOFError
        If the file ends within the header or within the content of a frame.
    """
    fh = open(name, 'rb')
    try:
        header = fh.read_header()
        fh.header0 = header
        frames = fh.read_frames(strict=strict)
    finally:
        if fh.fh_raw is not name:
            fh.close()

    return header, frames


def write(name, header, frames):
    """Write a header and frames to an AAVF file.

    Frame content is written as is; use `~ascv.aavf.AAVFFrame.fromdata`
    to construct frames with content encoded as indicated by the header.

    Parameters
    ----------
    name : str or filehandle
        File name or filehandle.  An existing file is overwritten.
    header : `~ascv.aavf.AAVFHeader`
        Header to write at the start.
    frames : iterable
        Of `~ascv.aavf.AAVFFrame` or bytes-like content as it should be
        stored.
    """
    fw = open(name, 'wb')
    try:
        fw.write_header(header)
        fw.write_frames(frames)
    finally:
        if fw.fh_raw is not name:
            fw.close()
