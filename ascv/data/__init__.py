# Licensed under the GPLv3 - see LICENSE
"""Sample files with ASCII-art video stored in the AAVF format."""

# Use private names to avoid inclusion in the sphinx documentation.
from os import path as _path


def _full_path(name, dirname=_path.dirname(_path.abspath(__file__))):
    return _path.join(dirname, name)


SAMPLE_AAVF = _full_path('sample.ascv')
"""AAVF sample.  width=8, height=2, fps=10, frames=3, run-length encoded.

Created by hand, with frames showing a half-filled block, a block with a
notch, and a block of '@' characters, i.e., decoded content::

    '        ########'
    '  ####  ########'
    '@@@@@@@@@@@@@@@@'
"""
