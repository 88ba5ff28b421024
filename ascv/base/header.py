# Licensed under the GPLv3 - see LICENSE
"""
Base definitions for headers stored as fixed-layout binary records.

Defines a header class DTypeHeaderBase that holds the record in a numpy
structured scalar, whose `~numpy.dtype` describes exactly how the fields are
laid out in the file (byte order, widths, no padding), and provides access
to the values of those fields via a dict-like interface.
"""
import operator
import warnings

import numpy as np


__all__ = ['DTypeHeaderBase']


class DTypeHeaderBase:
    """Base class for headers represented by a fixed binary layout.

    The layout is captured using a `numpy.dtype`, which should be defined on
    the class as ``_dtype``.  Since the dtype fixes byte order and offsets of
    all fields, the header can be read and written byte for byte,
    independently of the platform.

    Subclasses define the record with class attributes:

      _dtype : structured `~numpy.dtype`, with explicit byte order.

      _defaults : dict of values used by ``fromvalues`` for keys not given.

      _properties : names of properties that ``update`` can set.

    Parameters
    ----------
    words : `~numpy.ndarray` or None
        Zero-dimensional array with dtype ``cls._dtype``.  If `None`,
        set to an all-zero record (and skip any verification).
    verify : bool, optional
        Whether to check the record.  Default: `True`.
    """

    _dtype = np.dtype([])
    """Structure for the header record.  To be overridden by subclasses."""

    _defaults = {}
    """Default values of header keys used by ``fromvalues``."""

    _properties = ()
    """Properties that can be set with ``update`` and ``fromvalues``."""

    def __init__(self, words, verify=True):
        if words is None:
            self.words = np.zeros((), self._dtype)
        else:
            self.words = words
            if verify:
                self.verify()

    def verify(self):
        """Check that the record has the expected layout.

        Formats extend this with checks of the values.
        """
        assert self.words.dtype == self._dtype
        assert self.words.shape == ()

    def copy(self):
        """Create a mutable and independent copy of the header."""
        return self.__class__(self.words.copy(), verify=False)

    def __copy__(self):
        return self.copy()

    @property
    def mutable(self):
        """Whether keys can be set, i.e., whether the record is writeable."""
        return self.words.flags['WRITEABLE']

    @mutable.setter
    def mutable(self, value):
        self.words.flags['WRITEABLE'] = value

    @classmethod
    def fromfile(cls, fh, verify=True, **kwargs):
        """Read a header from a filehandle.

        The header is immutable; use ``copy`` to get one that can be changed.

        Raises
        ------
        EOFError
            If the file ends before the full header is read.
        """
        s = fh.read(cls._dtype.itemsize)
        if len(s) < cls._dtype.itemsize:
            raise EOFError('reached EOF while reading {0}'
                           .format(cls.__name__))
        words = np.ndarray(buffer=s, shape=(), dtype=cls._dtype)
        self = cls(words, verify=verify, **kwargs)
        self.mutable = False
        return self

    def tofile(self, fh):
        """Write header to filehandle."""
        return fh.write(self.tobytes())

    def tobytes(self):
        """The header record, as it is stored in a file."""
        return self.words.tobytes()

    @property
    def nbytes(self):
        """Size of the header in bytes."""
        return self._dtype.itemsize

    @classmethod
    def fromvalues(cls, *, verify=True, **kwargs):
        """Create a header from values of keys and properties.

        Keys not given are set to the class defaults, or to zero if there
        is no default.  Since values are applied with `update`, properties
        listed in ``_properties`` (e.g., ``frame_shape``) can be used too,
        and ``cls.fromvalues(**header) == header`` for any header.

        Parameters
        ----------
        verify : bool, optional
            Whether to verify the header.  Default: `True`.
        **kwargs
            Values of header keys or properties.
        """
        self = cls(None, verify=False)
        self.update(verify=verify, **{**self._defaults, **kwargs})
        return self

    @classmethod
    def fromkeys(cls, **kwargs):
        """Create a header from values for all its keys.

        Unlike `fromvalues`, no defaults or properties are used.

        Raises
        ------
        KeyError
            If any key is missing, or if any unknown keyword is given.
        """
        verify = kwargs.pop('verify', True)
        missing = set(cls._dtype.names).difference(kwargs)
        extra = set(kwargs).difference(cls._dtype.names)
        if missing or extra:
            problems = ([f"is missing keywords ({missing})"] if missing
                        else []) + ([f"contains extra keywords ({extra})"]
                                    if extra else [])
            raise KeyError("input list " + " and ".join(problems))

        self = cls(None, verify=False)
        self.update(verify=verify, **kwargs)
        return self

    def update(self, *, verify=True, **kwargs):
        """Set values of keys and properties.

        Keys are set first, then properties, in the order given by
        ``_properties``, so that properties can override keys.  Any
        keywords that are neither give a warning.

        Parameters
        ----------
        verify : bool, optional
            Whether to verify the header afterwards.  Default: `True`.
        **kwargs
            Values of header keys or properties.
        """
        for key in self.keys():
            if key in kwargs:
                self[key] = kwargs.pop(key)

        for prop in self._properties:
            if prop in kwargs:
                setattr(self, prop, kwargs.pop(prop))

        if kwargs:
            warnings.warn(f"some keywords unused in header update: {kwargs}")

        if verify:
            self.verify()

    def keys(self):
        """All keys defined for this header."""
        return self._dtype.names

    def _ipython_key_completions_(self):
        # Enables tab-completion of header keys in IPython.
        return self.keys()

    def __contains__(self, key):
        return key in self.keys()

    def __iter__(self):
        return iter(self.keys())

    def _check_key(self, key):
        if key not in self.keys():
            raise KeyError(f"{type(self).__name__} header does not "
                           f"contain {key}")

    def __getitem__(self, key):
        self._check_key(key)
        return self.words[key][()]

    def __setitem__(self, key, value):
        """Set the value of a key.

        Integer fields only accept integers (others raise `TypeError`),
        and byte strings are padded with zero bytes to the field size.
        Values that do not fit raise `ValueError`.
        """
        self._check_key(key)
        if not self.mutable:
            raise TypeError("header is immutable. Set '.mutable` attribute"
                            " or make a copy.")

        field = self._dtype[key]
        if field.kind in 'iu':
            value = operator.index(value)
            limits = np.iinfo(field)
            if not limits.min <= value <= limits.max:
                raise ValueError(f"{value} cannot be represented with "
                                 f"{limits.bits} bits")
        elif field.kind in 'SV':
            value = (value.tobytes() if isinstance(value, np.generic)
                     else bytes(value))
            if len(value) > field.itemsize:
                raise ValueError(f"{value!r} is longer than the "
                                 f"{field.itemsize} bytes available")
            value = value.ljust(field.itemsize, b'\x00')

        self.words[key] = value

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.tobytes() == other.tobytes())

    def _repr_value(self, key, value):
        return str(value)

    def __repr__(self):
        name = type(self).__name__
        indent = ",\n  " + " " * len(name)
        return "<{} {}>".format(name, indent.join(
            f"{key}: {self._repr_value(key, self[key])}" for key in self))
