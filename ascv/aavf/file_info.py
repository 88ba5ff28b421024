# Licensed under the GPLv3 - see LICENSE
"""The AAVFFileReaderInfo property.

Includes information from the header and checks of the declared against
the actual number of frames.
"""
from ..base.file_info import FileReaderInfo, info_item


__all__ = ['AAVFFileReaderInfo']


class AAVFFileReaderInfo(FileReaderInfo):
    attr_names = ('format', 'version', 'frame_shape', 'frame_rate',
                  'compression', 'charset', 'number_of_frames', 'duration',
                  'readable', 'missing', 'checks', 'errors', 'warnings')
    """Attributes that the container provides."""

    frame_shape = info_item(needs='header0', doc=(
        'Shape of each frame in characters, i.e., (height, width).'))

    @info_item(needs='header0')
    def version(self):
        """Format version."""
        return int(self.header0['version'])

    @info_item(needs='header0')
    def compression(self):
        """Compression flag: 0 for content as is, 1 for run-length encoded."""
        return int(self.header0['compression'])

    @info_item(needs='header0')
    def charset(self):
        """Identifier of the character set used in the frames."""
        return int(self.header0['charset'])

    @info_item(needs='frames')
    def number_of_frames(self):
        """Number of frames actually present in the file."""
        number_of_frames = len(self.frames)
        declared = int(self.header0['frames'])
        if number_of_frames != declared:
            self.warnings['number_of_frames'] = (
                f"header declares {declared} frames but file contains "
                f"{number_of_frames}")
        return number_of_frames

    @info_item(needs='header0', missing='zero frame rate; cannot '
               'calculate duration.')
    def duration(self):
        """Play time of the frames in the file."""
        frame_rate = self.header0.frame_rate
        if frame_rate == 0:
            return None
        n = self.number_of_frames
        if n is None:
            n = int(self.header0['frames'])
        return (n / frame_rate).to('s')
