# Licensed under the GPLv3 - see LICENSE
"""Wrappers of binary files holding a container.

`~ascv.base.base.FileBase` wraps a binary filehandle, to which a format
adds methods such as ``read_frame`` or ``write_frame``.  Readers can be
pickled: the file name and position are stored, and the file is re-opened
when unpickling.

`~ascv.base.base.FileOpener` and `~ascv.base.base.FileInfo` create the
``open`` and ``info`` functions of a format from the classes defined in
its ``base`` module.
"""
import io
import functools
import textwrap
from contextlib import contextmanager


__all__ = ['FileBase', 'FileInfo', 'FileOpener']


def _format_name(ns):
    """Infer the format name from a ``<fmt>FileReader`` class in ``ns``."""
    for key in ns:
        if key.endswith('FileReader'):
            return key[:-len('FileReader')]

    raise ValueError('namespace does not contain a FileReader, '
                     'so fmt cannot be guessed.')


def _as_function(method, name, module=None, doc=None):
    """Wrap a bound method as a plain function for use in a namespace."""
    @functools.wraps(method)
    def function(*args, **kwargs):
        return method(*args, **kwargs)

    function.__name__ = function.__qualname__ = name
    if doc:
        function.__doc__ = doc
    # Ensures sphinx documents the function with the module.
    if module:
        function.__module__ = module
    return function


class FileBase:
    """Binary file wrapper, to which container methods can be added.

    Attributes not defined on the wrapper are looked up on the underlying
    filehandle, ``fh_raw``, so that the wrapper can be used much like the
    file itself (``tell``, ``seek``, ``closed``, etc.).

    Parameters
    ----------
    fh_raw : filehandle
        Binary file to wrap.

    Notes
    -----
    Readers should define ``read_header``, ``read_frame``, ``read_frames``
    and ``get_frame_rate``, as well as an ``info`` descriptor, usually an
    instance of `~ascv.base.file_info.FileReaderInfo` or a subclass.
    Writers should define ``write_header`` and ``write_frame``.
    """
    fh_raw = None

    def __init__(self, fh_raw):
        self.fh_raw = fh_raw

    def __getattr__(self, attr):
        if not attr.startswith('_'):
            try:
                return getattr(self.fh_raw, attr)
            except AttributeError:
                pass
        # Let the normal lookup raise the error.
        return self.__getattribute__(attr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.fh_raw.close()

    @contextmanager
    def temporary_offset(self, offset=None, whence=0):
        """Move to another position in the file within a ``with`` block.

        The original position is restored on leaving the block, also if an
        exception occurred.  If ``offset`` is given, the file is positioned
        there (relative to ``whence``, as for :meth:`io.IOBase.seek`) on
        entering the block::

            with fh.temporary_offset(0):
                header = fh.read_header()
        """
        start = self.tell()
        try:
            if offset is not None:
                self.seek(offset, whence)
            yield self
        finally:
            self.seek(start)

    def __repr__(self):
        return f"{type(self).__name__}(fh_raw={self.fh_raw})"

    def __getstate__(self):
        if self.writable():
            raise TypeError('cannot pickle file opened for writing')

        state = vars(self).copy()
        # Open files cannot be pickled, so store where to find them.
        if isinstance(self.fh_raw, io.IOBase):
            fh = state.pop('fh_raw')
            state['fh_info'] = {'filename': fh.name,
                                'mode': fh.mode,
                                'offset': None if fh.closed else fh.tell()}
        return state

    def __setstate__(self, state):
        fh_info = state.pop('fh_info', None)
        if fh_info is not None:
            fh = io.open(fh_info['filename'], fh_info['mode'])
            if fh_info['offset'] is None:
                fh.close()
            else:
                fh.seek(fh_info['offset'])
            state['fh_raw'] = fh

        vars(self).update(state)


class FileInfo:
    """Collector of information on files of a given format.

    Instances are called with a file name, open it for reading and return
    the reader's ``info``.  Usually created with `FileInfo.create`.

    Parameters
    ----------
    opener : callable
        Function that opens a file for reading, e.g., the ``open`` function
        of a format.
    """

    def __init__(self, opener):
        self.open = opener

    def __call__(self, name):
        """Collect container file information.

        Opens the file for reading and checks whether it is of the correct
        format.  If so, the header is interpreted and all frames are read
        to count them and to check they can be decoded.

        Parameters
        ----------
        name : str or filehandle
            File name or filehandle.

        Returns
        -------
        info : `~ascv.base.file_info.FileReaderInfo` or `Exception`
            Information on the file.  Evaluates as `False` if the file was
            not in the right format.  If the file could not be opened at
            all, the exception raised is returned instead.
        """
        try:
            with self.open(name, 'rb') as fh:
                return fh.info
        except Exception as exc:
            return exc

    @classmethod
    def create(cls, ns):
        """Create an ``info`` function for the format defined in ``ns``.

        Parameters
        ----------
        ns : dict
            Namespace with the ``open`` function and file reader of the
            format.  Usually ``globals()`` of the calling module.
        """
        fmt = _format_name(ns)
        info = cls(ns['open'])
        doc = info.__call__.__doc__.replace(
            'Collect container file information.',
            f'Collect {fmt} file information.')
        return _as_function(info.__call__, 'info',
                            module=ns.get('__name__'), doc=doc)


class FileOpener:
    """Opener of files of a given format.

    Instances are used as the ``open`` function of a format.  Usually
    created with `FileOpener.create`, so that the function is documented
    properly.

    Parameters
    ----------
    fmt : str
        Name of the format.
    classes : dict
        File reader and writer classes, keyed by mode ('rb' and 'wb').
    header_class : `~ascv.base.header.DTypeHeaderBase` subclass
        Used to construct a header from keyword arguments when writing.
    """

    def __init__(self, fmt, classes, header_class):
        self.fmt = fmt
        self.classes = classes
        self.header_class = header_class

    def normalize_mode(self, mode):
        """Interpret mode as one of the keys of ``classes``.

        Besides the keys themselves, accepts 'br'/'bw' and 'r'/'w'.
        """
        for candidate in (mode, mode[::-1], mode + 'b'):
            if candidate in self.classes:
                return candidate

        raise ValueError(f'invalid mode: {mode} '
                         f'({self.fmt} supports {set(self.classes)}).')

    def is_fh(self, name):
        """Whether name is a filehandle."""
        return hasattr(name, 'read') or hasattr(name, 'write')

    def get_header0(self, kwargs):
        """Get header0 from kwargs or construct it from kwargs.

        Keyword arguments that match header keys or properties are popped
        from kwargs; others are left for the file reader or writer.
        Returns `None` if there is nothing to construct a header from.
        """
        header0 = kwargs.pop('header0', None)
        if header0 is None:
            maybe_used = (set(self.header_class._dtype.names or ())
                          | set(self.header_class._properties))
            tried = {key: kwargs.pop(key) for key in list(kwargs)
                     if key in maybe_used}
            if tried:
                header0 = self.header_class.fromvalues(**tried)

        return header0

    def get_fh(self, name, mode):
        """Open name in the given mode, unless it is a filehandle already.

        Files opened for writing are also readable.
        """
        if self.is_fh(name):
            return name

        return io.open(name, mode=mode.replace('w', 'w+'))

    def __call__(self, name, mode='rb', **kwargs):
        """
        Open container file for reading or writing.

        Gives a wrapped filehandle with methods to read or write a header
        and frames.

        Parameters
        ----------
        name : str or filehandle
            File name or filehandle.
        mode : {'rb', 'wb'}, optional
            Whether to open for reading or writing.  Default: 'rb'.
        **kwargs
            Additional arguments passed on to the file reader or writer.
            For writing, a ``header0``, or keywords to construct one, can
            be given, in which case the header is written immediately.
        """
        mode = self.normalize_mode(mode)
        if mode == 'wb':
            header0 = self.get_header0(kwargs)
            if header0 is not None:
                kwargs['header0'] = header0

        fh = self.get_fh(name, mode)
        try:
            return self.classes[mode](fh, **kwargs)
        except Exception:
            # Do not leave files we opened ourselves dangling.
            if fh is not name:
                fh.close()
            raise

    @classmethod
    def create(cls, ns, doc=None):
        """Create an ``open`` function for the format defined in ``ns``.

        The namespace should contain ``<fmt>FileReader``,
        ``<fmt>FileWriter`` and ``<fmt>Header`` classes, with the format
        name ``fmt`` inferred from the reader.

        Parameters
        ----------
        ns : dict
            Namespace to look in.  Usually ``globals()`` of the calling
            module.
        doc : str, optional
            Format-specific documentation, appended to that of ``__call__``.
        """
        fmt = _format_name(ns)
        classes = {'rb': ns[fmt + 'FileReader'],
                   'wb': ns[fmt + 'FileWriter']}
        opener = cls(fmt, classes, ns.get(fmt + 'Header'))
        if doc is not None:
            doc = (textwrap.dedent(opener.__call__.__doc__).replace(
                'Open container file for reading or writing.',
                f'Open {fmt} file for reading or writing.') + doc)
        return _as_function(opener.__call__, 'open',
                            module=ns.get('__name__'), doc=doc)
