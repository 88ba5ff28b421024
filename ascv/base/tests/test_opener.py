# Licensed under the GPLv3 - see LICENSE
import io
import pickle

import pytest
import numpy as np

from ..header import DTypeHeaderBase
from ..base import FileOpener, FileInfo, FileBase


class BareHeader(DTypeHeaderBase):
    _dtype = np.dtype([('x', 'u1'), ('y', '<u2')])
    _defaults = {'x': 1}


class BareFileReader(FileBase):
    def read_header(self):
        return BareHeader.fromfile(self.fh_raw)


class BareFileWriter(FileBase):
    def __init__(self, fh_raw, header0=None, *, parrot='alive'):
        if parrot == 'dead':
            raise ValueError('parrot is dead')
        super().__init__(fh_raw)
        self.header0 = header0
        if header0 is not None:
            header0.tofile(fh_raw)


class TestFileOpener:
    def setup_class(cls):
        cls.classes = {'rb': BareFileReader,
                       'wb': BareFileWriter}
        cls.file_opener = FileOpener('Bare', classes=cls.classes,
                                     header_class=BareHeader)
        cls.open = staticmethod(FileOpener.create(globals(), doc='extra'))

    def test_create_opener(self):
        assert self.open.__wrapped__.__func__ is FileOpener.__call__
        assert 'Open Bare file for reading or writing.' in self.open.__doc__
        assert self.open.__doc__.endswith('extra')
        assert self.open.__module__ == __name__

    def test_create_opener_wrong_ns(self):
        with pytest.raises(ValueError, match='does not contain'):
            FileOpener.create(locals(), doc='extra')

    @pytest.mark.parametrize('mode, normalized', [
        ('rb', 'rb'), ('br', 'rb'), ('r', 'rb'),
        ('wb', 'wb'), ('bw', 'wb'), ('w', 'wb')])
    def test_normalize_mode(self, mode, normalized):
        assert self.file_opener.normalize_mode(mode) == normalized

    @pytest.mark.parametrize('mode', ['a', 'rs', 'x'])
    def test_invalid_mode(self, mode):
        with pytest.raises(ValueError, match='invalid mode'):
            self.file_opener.normalize_mode(mode)

    def test_is_fh(self):
        assert self.file_opener.is_fh(io.BytesIO())
        assert not self.file_opener.is_fh('name')

    def test_get_header0(self):
        header = BareHeader.fromvalues(y=10)
        kwargs = {'header0': header}
        assert self.file_opener.get_header0(kwargs) is header
        assert kwargs == {}
        kwargs = {'y': 10}
        assert self.file_opener.get_header0(kwargs) == header
        assert kwargs == {}
        assert self.file_opener.get_header0({}) is None
        kwargs = {'y': 10, 'parrot': 'dead'}
        assert self.file_opener.get_header0(kwargs) == header
        assert kwargs == {'parrot': 'dead'}

    def test_write_read(self, tmpdir):
        name = str(tmpdir.join('bare.bin'))
        with self.open(name, 'w', y=1000) as fw:
            assert isinstance(fw, BareFileWriter)
            assert fw.header0 == BareHeader.fromvalues(y=1000)
        assert fw.closed

        with self.open(name) as fh:
            assert isinstance(fh, BareFileReader)
            header = fh.read_header()
        assert fh.closed
        assert header['x'] == 1
        assert header['y'] == 1000

    def test_filehandle_not_closed_on_error(self):
        fh = io.BytesIO()
        with pytest.raises(ValueError, match='dead'):
            self.open(fh, 'wb', parrot='dead')
        assert not fh.closed

    def test_file_closed_on_error(self, tmpdir, monkeypatch):
        opened = []
        get_fh = FileOpener.get_fh

        def recording_get_fh(self, name, mode):
            fh = get_fh(self, name, mode)
            opened.append(fh)
            return fh

        monkeypatch.setattr(FileOpener, 'get_fh', recording_get_fh)
        name = str(tmpdir.join('dead.bin'))
        with pytest.raises(ValueError, match='dead'):
            self.open(name, 'wb', parrot='dead')
        assert len(opened) == 1
        assert opened[0].closed


class TestFileBase:
    def test_attribute_access(self):
        fh = BareFileReader(io.BytesIO(b'\x01\x01\x02abc'))
        assert fh.tell() == 0
        assert fh.read_header() == BareHeader.fromvalues(y=513)
        assert fh.tell() == 3
        assert fh.readable()
        with pytest.raises(AttributeError):
            fh.nonexistent
        with pytest.raises(AttributeError):
            fh._private
        assert repr(fh).startswith('BareFileReader(fh_raw=')

    def test_temporary_offset(self):
        fh = BareFileReader(io.BytesIO(b'\x01\x01\x02abc'))
        fh.seek(4)
        with fh.temporary_offset(0) as fh2:
            assert fh2 is fh
            assert fh.tell() == 0
            fh.read(2)
        assert fh.tell() == 4
        with fh.temporary_offset():
            fh.seek(1)
        assert fh.tell() == 4

    def test_pickle(self, tmpdir):
        name = str(tmpdir.join('bare.bin'))
        with open(name, 'wb') as fw:
            fw.write(b'\x01\x01\x02abc')

        with BareFileReader(io.open(name, 'rb')) as fh:
            fh.seek(3)
            pickled = pickle.dumps(fh)
            with pickle.loads(pickled) as fh2:
                assert fh2.tell() == 3
                assert fh2.read() == b'abc'
            assert fh.tell() == 3

        with BareFileWriter(io.open(str(tmpdir.join('w.bin')), 'wb')) as fw:
            with pytest.raises(TypeError, match='writing'):
                pickle.dumps(fw)


class TestFileInfo:
    def setup_class(cls):
        cls.open = FileOpener('Bare', {'rb': BareFileReader,
                                       'wb': BareFileWriter}, BareHeader)

    def test_create(self):
        ns = {'__name__': 'bare', 'BareFileReader': BareFileReader,
              'open': self.open}
        info = FileInfo.create(ns)
        assert info.__module__ == 'bare'
        assert 'Collect Bare file information.' in info.__doc__

    def test_unopenable(self, tmpdir):
        info = FileInfo(self.open)
        result = info(str(tmpdir.join('nonexistent.bin')))
        assert isinstance(result, FileNotFoundError)
