# Licensed under the GPLv3 - see LICENSE
"""Base implementations shared between container formats.

Files are considered as composed of a header followed by multiple frames,
each of which have a payload that can be encoded in various ways.  Base
classes implementing the decoding and encoding and exposing a standardized
interface are found in the corresponding `~ascv.base.header` and
`~ascv.base.payload` modules, with the separate `~ascv.base.encoding`
module providing the variable-length quantity and run-length codecs.

The `~ascv.base.base` module defines base methods for file readers and
writers that read or write the header and frames.  Each file reader has an
``info`` property, defined in `~ascv.base.file_info`, that provides
standardized information.

Finally, `~ascv.base.utils` contains some general utility routines.
"""
