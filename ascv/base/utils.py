# Licensed under the GPLv3 - see LICENSE
import numpy as np
from astropy.utils import classproperty


__all__ = ['fixedvalue', 'byte_array']


class fixedvalue(classproperty):
    """Class property whose value cannot be changed.

    Setting it on an instance is allowed only to the value it already has;
    any other value raises `ValueError`.
    """
    def __set__(self, instance, value):
        fixed = self.__get__(instance, type(instance))
        if value != fixed:
            raise ValueError(f"fixed property can only be set to {fixed}.")


def byte_array(data):
    """Convert data to a flat array of unsigned bytes.

    Parameters
    ----------
    data : `~numpy.ndarray` or bytes-like
        Data to convert.  For a `~numpy.ndarray`, a byte view of its
        contents is taken (after making it contiguous if needed).  Any
        other object has to support the buffer protocol, e.g., `bytes`,
        `bytearray`, or `memoryview`.

    Returns
    -------
    byte_array : `~numpy.ndarray` of uint8
        One-dimensional.  May share memory with ``data``.
    """
    if isinstance(data, np.ndarray):
        return np.ascontiguousarray(data).reshape(-1).view(np.uint8)

    if isinstance(data, str):
        raise TypeError('cannot interpret a str as bytes; encode it first.')

    return np.frombuffer(data, dtype=np.uint8)
