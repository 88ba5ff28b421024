# Licensed under the GPLv3 - see LICENSE
"""Test things that are not already tested with the AAVF format."""
import pytest

from ..file_info import info_item, InfoBase, FileReaderInfo


class BareParent:
    closed = False
    value = 3


class BareInfo(InfoBase):
    attr_names = ('format', 'value', 'double', 'broken', 'nothing',
                  'missing', 'errors')
    missing = info_item(default={}, copy=True)
    errors = info_item(default={}, copy=True)
    value = info_item(needs='_parent')

    @info_item(needs='_parent')
    def format(self):
        """The format."""
        return 'bare'

    @info_item(needs='value')
    def double(self):
        """Twice the value."""
        return 2 * self.value

    @info_item(needs='_parent')
    def broken(self):
        """Something that fails."""
        raise ValueError('broken')

    @info_item(needs='_parent', missing='nothing there', default=0)
    def nothing(self):
        """Something that is not there."""
        return None


def test_str_repr():
    # Directly assigned
    assert str(FileReaderInfo.errors).startswith('errors: ')
    # From parent
    assert str(BareInfo.value) == 'value: Link to parent.value'
    # From function
    assert str(FileReaderInfo.header0).startswith('header0: ')
    # From function with needs (i.e., via __call__)
    assert str(FileReaderInfo.readable).startswith('readable: ')
    assert repr(FileReaderInfo.errors).startswith('<info_item errors')
    assert repr(FileReaderInfo()).startswith('FileReaderInfo (unbound)')

    with pytest.raises(TypeError, match="assigned 'info_item'"):
        FileReaderInfo.readable('a')


def test_info_items():
    info = BareInfo(BareParent())
    assert info
    assert info.value == 3
    assert info.double == 6
    assert info.broken is None
    assert info.nothing == 0
    assert isinstance(info.errors['broken'], ValueError)
    assert info.missing == {'nothing': 'nothing there'}
    # Mutable defaults are not shared between instances.
    info2 = BareInfo(BareParent())
    assert info2.errors is not info.errors

    result = info()
    assert result['value'] == 3
    assert result['nothing'] == 0
    assert 'broken' not in result
    assert set(result['errors']) == {'broken'}
    r = repr(info)
    assert r.startswith('BareParent information:')
    assert 'double = 6' in r


def test_closed_parent():
    parent = BareParent()
    parent.closed = True
    info = BareInfo(parent)
    assert repr(info) == 'File closed. Not parsable.'
