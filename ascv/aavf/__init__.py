# Licensed under the GPLv3 - see LICENSE
"""ASCII-art video format (AAVF) reader/writer.

An AAVF file (customarily with extension ``.ascv``) consists of a 32-byte
header describing the video, followed by the frames, each stored as its
length (a variable-length quantity) followed by its content.  The content
can be stored as is or run-length encoded.
"""
from .base import open, info, read, write  # noqa
from .header import (AAVFHeader, InvalidFormatError, MAGIC,  # noqa
                     COMPRESSION_NONE, COMPRESSION_RLE)
from .payload import AAVFPayload  # noqa
from .frame import AAVFFrame  # noqa
