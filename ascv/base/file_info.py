# Licensed under the GPLv3 - see LICENSE
"""Information on container files, gathered without raising.

The ``info`` attribute of file readers is an instance of a subclass of
`~ascv.base.file_info.InfoBase`, whose attributes are `info_item`
descriptors.  Each is evaluated once, on first access; anything that goes
wrong is stored in the ``errors`` dict instead of being raised, so that
even a file in the wrong format or with corrupted frames yields useful
information.
"""
import copy
import operator
import warnings

from astropy import units as u


__all__ = ['info_item', 'InfoBase', 'FileReaderInfo']


class info_item:
    """Lazily evaluated attribute of an info instance.

    Can be used directly as a decorator of a method, as a decorator after
    being called with keyword arguments, or assigned to a class attribute,
    in which case the value is looked up on the first of ``needs``.

    Once calculated, the value is stored on the instance, so the descriptor
    is not consulted again.

    Parameters
    ----------
    attr : str or callable, optional
        Function that calculates the value from the info instance, or the
        name of the attribute to look up.  Usually set implicitly.
    needs : str or tuple of str
        Attributes of the info instance that have to be present and not
        `None` for a value to be calculated.
    default : object, optional
        Value used if the needs are not met, if calculating the value fails,
        or if the calculation returns `None`.
    doc : str, optional
        Description.  By default, the docstring of the function.
    missing : str, optional
        Reason stored in ``instance.missing`` if the calculation gives `None`.
    copy : bool
        Whether to store a copy of the default, e.g., for a `dict` that
        the instance will fill in.
    """
    _fget = None

    def __init__(self, attr=None, *, needs=(), default=None, doc=None,
                 missing=None, copy=False):
        if not isinstance(needs, (tuple, list)):
            needs = (needs,)
        self.needs = tuple(needs)
        self.default = default
        self.missing = missing
        self.copy = copy
        self._bind(attr, doc)

    def _bind(self, attr, doc=None):
        if callable(attr):
            self.name = attr.__name__
            self._fget = attr
            doc = doc or attr.__doc__
        elif attr is not None:
            self.name = attr
            if self._fget is None and self.needs:
                path = '.'.join(self.needs + (attr,))
                self._fget = operator.attrgetter(path)
                doc = doc or "Link to {}".format(
                    path.replace('_parent', 'parent'))

        if doc and '__doc__' not in self.__dict__:
            self.__doc__ = doc

    def __set_name__(self, owner, name):
        self._bind(name)

    def __call__(self, func):
        if hasattr(self, 'name'):
            raise TypeError(f"assigned {type(self).__name__!r} "
                            f"is not callable")
        self._bind(func)
        return self

    def _needs_met(self, instance):
        return all(getattr(instance, need, None) is not None
                   for need in self.needs)

    def _evaluate(self, instance):
        if self._fget is None or not self._needs_met(instance):
            return self.default

        try:
            value = self._fget(instance)
        except Exception as exc:
            instance.errors[self.name] = exc
            return self.default

        if value is None:
            if self.missing:
                instance.missing[self.name] = self.missing
            return self.default

        return value

    def __get__(self, instance, cls=None):
        if instance is None:
            return self

        value = self._evaluate(instance)
        if self.copy:
            value = copy.copy(value)
        # Store on the instance, so later access bypasses the descriptor.
        instance.__dict__[self.name] = value
        return value

    def __str__(self):
        return "{}: {}".format(self.name, self.__doc__.splitlines()[0])

    def __repr__(self):
        settings = [f"{key}={value!r}" for key, value in (
            ('needs', self.needs), ('default', self.default),
            ('missing', self.missing), ('copy', self.copy)) if value]
        return "<{} {}{}>".format(
            type(self).__name__, self,
            (" (" + ", ".join(settings) + ")") if settings else "")


class InfoBase:
    """Collection of information on a file.

    Used as a descriptor on a file reader class: accessing ``reader.info``
    gives an instance bound to the reader, which is recreated whenever the
    reader has been closed or reopened.  On the class, the unbound
    descriptor is returned, whose ``repr`` lists the attributes.

    An instance is `True` if the file was of the right format, even if the
    file is corrupted beyond its header.

    Parameters
    ----------
    parent : file reader, optional
        Reader the information is gathered from.  If `None`, the instance
        is the unbound class attribute.
    """

    attr_names = ()
    """Names of the attributes that summarize the file."""

    _parent = None
    closed = info_item(needs='_parent', doc='Whether parent is closed')

    def __init__(self, parent=None):
        if parent is None:
            return

        self._parent = parent
        if not self.closed:
            # Evaluate everything now, while the file is accessible.
            for attr in self.attr_names:
                getattr(self, attr)

    def __get__(self, instance, owner_cls):
        if instance is None:
            return self

        info = vars(instance).get('info')
        if info is None or info.closed != instance.closed:
            info = self.__class__(parent=instance)
            vars(instance)['info'] = info

        return info

    def __delete__(self, instance):
        # A data descriptor, so that __get__ is always used.
        vars(instance).pop('info', None)

    def __bool__(self):
        return self.format is not None

    def __call__(self):
        """Summarize the information in a dict.

        Attributes that are `None` or empty are left out.
        """
        summary = {}
        for attr in self.attr_names:
            value = getattr(self, attr)
            if value is not None and not (isinstance(value, dict)
                                          and not value):
                summary[attr] = value
        return summary

    def _format_attr(self, attr, value):
        if isinstance(value, dict):
            lines = []
            for i, (key, item) in enumerate(value.items()):
                label = f"\n{attr}: " if i == 0 else ' ' * (len(attr) + 2)
                lines.append(f"{label} {key}: {str(item) or repr(item)}")
            return lines

        if isinstance(value, u.Quantity):
            value = value.round(6)
        return [f"{attr} = {value}"]

    def __repr__(self):
        if self._parent is None:
            lines = [f"{self.__class__.__name__} (unbound) with attributes:"]
            lines.extend(f"  {getattr(type(self), attr)}"
                         for attr in self.attr_names)
            return '\n'.join(lines)

        if self.closed:
            return "File closed. Not parsable."

        name = type(self._parent).__name__.replace('Reader', '')
        lines = [name + ' information:']
        for attr in self.attr_names:
            value = getattr(self, attr)
            if value is not None:
                lines.extend(self._format_attr(attr, value))

        if not self:
            lines.append('\nNot parsable. Wrong format?')

        return '\n'.join(lines)


class FileReaderInfo(InfoBase):
    """Information on a file read with a file reader.

    The header at the start of the file determines whether the file has
    the right format; all frames are then read to count them and to check
    that their content can be decoded.

    The file reader should provide ``read_header``, ``read_frames`` and
    ``get_frame_rate`` methods.
    """
    attr_names = ('format', 'number_of_frames', 'frame_rate', 'readable',
                  'missing', 'checks', 'errors', 'warnings')
    """Names of the attributes that summarize the file."""

    missing = info_item(default={}, copy=True,
                        doc='Attributes that could not be determined.')
    checks = info_item(default={}, copy=True,
                       doc='Results of checks for readability.')
    errors = info_item(default={}, copy=True,
                       doc='Exceptions raised while determining attributes.')
    warnings = info_item(default={}, copy=True,
                         doc='Problems that did not prevent reading.')

    @info_item
    def header0(self):
        """Header at the start of the file."""
        with self._parent.temporary_offset(0) as fh:
            with warnings.catch_warnings():
                warnings.simplefilter('ignore')
                return fh.read_header()

    @info_item(needs='header0')
    def format(self):
        """Name of the file format."""
        name = type(self._parent).__name__
        return name[:name.index('File')].lower()

    @info_item(needs='header0')
    def frames(self):
        """All frames in the file, in order."""
        with self._parent.temporary_offset(0) as fh:
            fh.read_header()
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always')
                frames = fh.read_frames()

        if caught:
            self.warnings['frames'] = '; '.join(
                str(warning.message) for warning in caught)
        return frames

    @info_item(needs='frames')
    def number_of_frames(self):
        """Number of frames in the file."""
        return len(self.frames)

    @info_item(needs='header0')
    def frame_rate(self):
        """Number of frames per second."""
        return self._parent.get_frame_rate()

    @info_item(needs='frames', default=False)
    def decodable(self):
        """Whether the content of all frames could be decoded."""
        for frame in self.frames:
            frame.data
        return True

    @info_item(needs='frames', default=False)
    def readable(self):
        """Whether all frames could be read and decoded."""
        self.checks['decodable'] = self.decodable
        return all(self.checks.values())
